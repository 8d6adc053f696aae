"""Record types for plaintext and encrypted secrets."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .errors import DecodingError

FIELDS = ("name", "secret", "salt")


@dataclass(frozen=True)
class Secret:
    """A named plaintext secret."""

    name: str
    secret: str


@dataclass(frozen=True)
class Encrypted:
    """
    A named secret as persisted by a backend.

    `secret` is base64(nonce || tag || ciphertext) and `salt` is the
    base64 key-derivation salt. Neither is meaningful without the other.
    """

    name: str
    secret: str
    salt: str

    def to_dict(self) -> dict[str, str]:
        """Serialize to a mapping with keys in storage order."""
        return asdict(self)

    @classmethod
    def from_dict(cls, obj: Any) -> Encrypted:
        """Deserialize from a mapping read back from storage."""
        if not isinstance(obj, dict):
            raise DecodingError(f"expected a mapping, got {type(obj).__name__}")

        values = {}
        for field in FIELDS:
            value = obj.get(field)
            if not isinstance(value, str):
                raise DecodingError(f"field {field!r} is missing or not a string")
            values[field] = value
        return cls(**values)
