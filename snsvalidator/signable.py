"""Canonical signable string of an SNS message."""

from __future__ import annotations

import logging

from .contracts import NOTIFICATION_SIGNABLE_KEYS, MessageFieldMap, MessageType, has_field

logger = logging.getLogger(__name__)


def build_signable_bytes(field_map: MessageFieldMap) -> bytes:
    """Return the bytes SNS signed for ``field_map``.

    Each present key contributes ``"<key>\\n<value>\\n"`` in the order fixed for
    the message type. Keys that are missing or empty are skipped entirely.
    Unrecognised types use the notification order.
    """
    message_type = MessageType.lookup(field_map.get("Type"))
    keys = message_type.signable_keys if message_type else NOTIFICATION_SIGNABLE_KEYS

    parts = [f"{key}\n{field_map[key]}\n" for key in keys if has_field(field_map, key)]
    signable = "".join(parts).encode("utf-8")
    logger.debug(f"Built signable string of {len(signable)} bytes from {len(parts)} fields")
    return signable


__all__ = ["build_signable_bytes"]
