"""
Parsing of raw credential lines.

Pool lines are opaque text, conventionally ``identifier:password[:extra]``.
The identifier is an email when it contains "@", a username otherwise. Any
further ":"-separated content is kept verbatim as additional data. Lines
that don't split into at least two parts are kept whole as ``raw``.

    >>> parse_credential_line("user1:pass1:extra:data").to_dict()
    {'username': 'user1', 'password': 'pass1', 'additional_data': 'extra:data'}
    >>> parse_credential_line("a@b.com:pw").to_dict()
    {'email': 'a@b.com', 'password': 'pw'}
    >>> parse_credential_line("malformed").to_dict()
    {'raw': 'malformed'}
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

DELIMITER = ":"


@dataclass(frozen=True)
class CredentialRecord:
    """
    Structured form of one popped credential line.

    Exactly one of email/username is set for well-formed lines; malformed
    lines only set ``raw``.
    """

    email: str | None = None
    username: str | None = None
    password: str | None = None
    additional_data: str | None = None
    raw: str | None = None

    @property
    def is_malformed(self) -> bool:
        return self.raw is not None

    def to_dict(self) -> dict[str, Any]:
        """Populated fields only, in declaration order."""
        return {key: value for key, value in asdict(self).items() if value is not None}


def parse_credential_line(line: str) -> CredentialRecord:
    """Parse a pool line. Never raises."""
    parts = line.split(DELIMITER, 2)
    if len(parts) < 2:
        return CredentialRecord(raw=line)

    identifier, password = parts[0], parts[1]
    additional_data = parts[2] if len(parts) == 3 else None

    if "@" in identifier:
        return CredentialRecord(
            email=identifier, password=password, additional_data=additional_data
        )
    return CredentialRecord(
        username=identifier, password=password, additional_data=additional_data
    )
