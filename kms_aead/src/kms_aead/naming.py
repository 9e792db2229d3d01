"""Names used as the key of the KMS encryption context."""
from __future__ import annotations

from enum import Enum


class EncryptionContextName(str, Enum):
    """Which string key carries the hex-encoded associated data.

    Ciphertexts are bound to the exact context, so the name chosen when
    encrypting has to be used again when decrypting.
    """

    LEGACY_ADDITIONAL_DATA = "additionalData"
    ASSOCIATED_DATA = "associatedData"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | EncryptionContextName") -> "EncryptionContextName":
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        raise ValueError(f"Unknown encryption context name: {value!r}")


DEFAULT_CONTEXT_NAME = EncryptionContextName.LEGACY_ADDITIONAL_DATA

__all__ = ["EncryptionContextName", "DEFAULT_CONTEXT_NAME"]
