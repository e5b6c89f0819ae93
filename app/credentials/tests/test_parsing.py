"""
Tests for credential line parsing.
"""

import pytest

from credentials.parsing import CredentialRecord, parse_credential_line


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        (
            "user1:pass1:extra:data",
            {"username": "user1", "password": "pass1", "additional_data": "extra:data"},
        ),
        ("a@b.com:pw", {"email": "a@b.com", "password": "pw"}),
        ("malformed", {"raw": "malformed"}),
        ("a@b.com:pw:recovery@c.com", {
            "email": "a@b.com", "password": "pw", "additional_data": "recovery@c.com",
        }),
        ("user:", {"username": "user", "password": ""}),
        (":secret", {"username": "", "password": "secret"}),
        ("user:pw:", {"username": "user", "password": "pw", "additional_data": ""}),
    ],
)
def test_parse_credential_line(line, expected):
    assert parse_credential_line(line).to_dict() == expected


def test_malformed_flag():
    assert parse_credential_line("no-delimiter").is_malformed
    assert not parse_credential_line("u:p").is_malformed


def test_email_and_username_are_exclusive():
    record = parse_credential_line("someone@example.com:pw")

    assert record.email == "someone@example.com"
    assert record.username is None


def test_record_is_immutable():
    record = CredentialRecord(username="u", password="p")

    with pytest.raises(AttributeError):
        record.password = "changed"
