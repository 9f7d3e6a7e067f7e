"""Unit tests for provider error messages."""

from idbridge.adapter.identitytoolkit.messages import message_for


def test_known_code():
    assert message_for("USER_DISABLED") == "The user account has been disabled."


def test_code_with_detail_suffix():
    assert message_for("WEAK_PASSWORD : Password should be at least 6 characters") == (
        "The password must be at least 6 characters long."
    )


def test_unknown_code_uses_default_then_code():
    assert message_for("NEW_CODE", "Something went wrong") == "Something went wrong"
    assert message_for("NEW_CODE") == "NEW_CODE"
