"""Tests for control id encoding and decoding."""

from __future__ import annotations

import pytest

from webhook_service.controls import DECISIONS, ControlRef, decode_control_id, encode_control_id


@pytest.mark.parametrize(
    ("action", "subject_id", "option_index", "expected"),
    [
        ("approve", "42", None, "approve_42"),
        ("reject", "REQ-7", None, "reject_REQ-7"),
        ("confirm", "a.b", None, "confirm_a.b"),
        ("survey", "42", 0, "survey_42_0"),
        ("survey", "42", 4, "survey_42_4"),
    ],
)
def test_encode_and_decode_recovers_parts(action: str, subject_id: str, option_index: int | None, expected: str) -> None:
    """Encoded ids have the documented shape and decode back to their parts."""
    control_id = encode_control_id(action, subject_id, option_index)
    assert control_id == expected
    assert decode_control_id(control_id) == ControlRef(action, subject_id, option_index)


@pytest.mark.parametrize(("action", "subject_id"), [("approve", "a_b"), ("my_action", "42"), ("", "42"), ("approve", "")])
def test_encode_rejects_separator_and_empty_parts(action: str, subject_id: str) -> None:
    """Parts that would not decode uniquely are refused."""
    with pytest.raises(ValueError, match="Control"):
        encode_control_id(action, subject_id)


def test_decode_unknown_action_passes_through() -> None:
    """Unknown actions are decoded without interpretation."""
    ref = decode_control_id("archive_99")
    assert ref == ControlRef("archive", "99", None)
    assert ref.action not in DECISIONS


@pytest.mark.parametrize(
    ("control_id", "expected"),
    [
        ("approve", ControlRef("approve", "", None)),
        ("survey_42_x", ControlRef("survey", "42", None)),
        ("survey_42_1_9", ControlRef("survey", "42", 1)),
        ("", ControlRef("", "", None)),
    ],
)
def test_decode_tolerates_irregular_ids(control_id: str, expected: ControlRef) -> None:
    """Ids from outside the renderer never raise."""
    assert decode_control_id(control_id) == expected


def test_decisions_cover_every_rendered_action() -> None:
    """Each action the renderer emits maps to a decision."""
    assert DECISIONS == {
        "approve": "approved",
        "reject": "rejected",
        "confirm": "confirmed",
        "survey": "survey_response",
    }
