"""Marker codec for pre-blacklist state carried in ``details``.

Older records keep the state an enterprise held before blacklisting by
appending ``|PREVIOUS_STATE:<state>`` to the free-text ``details`` field.
Current records use the explicit ``previousState`` field; this codec reads
the old layout and, when legacy encoding is enabled, still writes it.
"""

from __future__ import annotations

from typing import Optional, Tuple

RECOVERY_MARKER = "|PREVIOUS_STATE:"


def has_marker(details: str) -> bool:
    return RECOVERY_MARKER in (details or "")


def encode_previous_state(details: str, previous_state: str) -> str:
    if has_marker(details):
        raise ValueError("details already contain the recovery marker")
    return f"{details}{RECOVERY_MARKER}{previous_state}"


def decode_previous_state(details: str) -> Tuple[str, Optional[str]]:
    """Split ``details`` into the original text and the encoded state.

    Returns ``(details, None)`` when no marker is present.

    Raises:
        ValueError: The marker occurs more than once
    """
    parts = (details or "").split(RECOVERY_MARKER)
    if len(parts) == 1:
        return parts[0], None
    if len(parts) != 2:
        raise ValueError(f"expected one recovery marker, found {len(parts) - 1}")
    return parts[0], parts[1]


__all__ = ["RECOVERY_MARKER", "has_marker", "encode_previous_state", "decode_previous_state"]
