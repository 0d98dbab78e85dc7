"""Announcement listeners for the MESSAGING phase.

Each factory returns a lifecycle listener that renders a plain-text line and
hands it to ``sink``, e.g. a chat broadcast function or ``print``.
"""
from __future__ import annotations

import logging
from typing import Callable
from uuid import UUID

from .events import LifecycleBus, ListenerPhase, RelicEvent, RelicLifecycleListener

logger = logging.getLogger(__name__)

Sink = Callable[[str], None]


def register_message_listener(sink: Sink) -> RelicLifecycleListener:
    def announce_register(relic, actor=None, payload=None):
        sink(f'A new {relic.rarity.value} relic named "{relic.name}" has been forged!')

    return announce_register


def claim_message_listener(sink: Sink, name_of: Callable[[UUID], str] = str) -> RelicLifecycleListener:
    """``name_of`` turns an owner id into a display name; defaults to the id itself."""

    def announce_claim(relic, actor=None, payload=None):
        owner = name_of(actor) if actor is not None else "someone"
        sink(f'"{relic.name}" has been claimed by {owner}!')

    return announce_claim


def destroy_message_listener(sink: Sink) -> RelicLifecycleListener:
    def announce_destroy(relic, actor=None, payload=None):
        sink(f'The relic "{relic.name}" has been DESTROYED!')

    return announce_destroy


def subscribe_announcements(
    bus: LifecycleBus, sink: Sink, name_of: Callable[[UUID], str] = str
) -> None:
    """Subscribe register, claim and destroy announcements in the MESSAGING phase."""
    bus.subscribe(RelicEvent.REGISTER, ListenerPhase.MESSAGING, register_message_listener(sink))
    bus.subscribe(RelicEvent.CLAIM, ListenerPhase.MESSAGING, claim_message_listener(sink, name_of))
    bus.subscribe(RelicEvent.DESTROY, ListenerPhase.MESSAGING, destroy_message_listener(sink))
    logger.debug("Subscribed relic announcements to %r", sink)
