from .codec import decode, dumps, encode, loads, validate_document
from .store import RegistryStore

__all__ = ["RegistryStore", "decode", "dumps", "encode", "loads", "validate_document"]
