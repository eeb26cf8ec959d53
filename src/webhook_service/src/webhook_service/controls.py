"""Encoding and decoding of control identifiers.

A control id is ``{action}_{subject_id}`` with an optional ``_{option_index}``
suffix for survey answers. The platform hands the id back verbatim when the
control is clicked, so it is the only state carried between the rendered
message and the interaction that follows.
"""

from __future__ import annotations

from typing import NamedTuple

CONTROL_ID_SEPARATOR = "_"

APPROVE = "approve"
REJECT = "reject"
CONFIRM = "confirm"
SURVEY = "survey"

DECISIONS = {
    APPROVE: "approved",
    REJECT: "rejected",
    CONFIRM: "confirmed",
    SURVEY: "survey_response",
}

__all__ = [
    "APPROVE",
    "CONFIRM",
    "CONTROL_ID_SEPARATOR",
    "DECISIONS",
    "REJECT",
    "SURVEY",
    "ControlRef",
    "decode_control_id",
    "encode_control_id",
]


class ControlRef(NamedTuple):
    """Decoded parts of a control id."""

    action: str
    subject_id: str
    option_index: int | None = None


def encode_control_id(action: str, subject_id: str, option_index: int | None = None) -> str:
    """Build the control id for an action on a subject.

    Raises:
        ValueError: If ``action`` or ``subject_id`` is empty or contains the separator.

    """
    for label, part in (("action", action), ("subject id", subject_id)):
        if not part:
            msg = f"Control {label} must not be empty."
            raise ValueError(msg)
        if CONTROL_ID_SEPARATOR in part:
            msg = f"Control {label} must not contain {CONTROL_ID_SEPARATOR!r}: {part}"
            raise ValueError(msg)
    parts = [action, subject_id]
    if option_index is not None:
        parts.append(str(option_index))
    return CONTROL_ID_SEPARATOR.join(parts)


def decode_control_id(control_id: str) -> ControlRef:
    """Split a control id back into action, subject id and optional index.

    Unknown actions are returned as-is; a missing or non-numeric index decodes to None.
    """
    action, _, rest = control_id.partition(CONTROL_ID_SEPARATOR)
    subject_id, _, raw_index = rest.partition(CONTROL_ID_SEPARATOR)
    raw_index = raw_index.split(CONTROL_ID_SEPARATOR, 1)[0]
    option_index = int(raw_index) if raw_index.isdigit() else None
    return ControlRef(action=action, subject_id=subject_id, option_index=option_index)
