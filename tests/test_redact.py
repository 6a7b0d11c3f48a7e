from __future__ import annotations

from pycustomers._redact import mask_email, redact_for_log


def test_redact_for_log_masks_personal_fields() -> None:
    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "businessName": "",
        "email": "ada@example.com",
        "nested": [{"email": "bob@example.com", "code": "duplicate_email"}],
    }

    redacted = redact_for_log(payload)
    assert redacted["firstName"] == "<redacted>"
    assert redacted["lastName"] == "<redacted>"
    assert redacted["businessName"] == ""
    assert redacted["email"] == "a***@example.com"
    assert redacted["nested"][0]["email"] == "b***@example.com"
    assert redacted["nested"][0]["code"] == "duplicate_email"


def test_mask_email_without_at_sign() -> None:
    assert mask_email("not-an-email") == "<redacted>"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]
