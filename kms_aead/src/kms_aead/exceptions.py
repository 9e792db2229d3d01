"""Central exception hierarchy for kms-aead."""
from __future__ import annotations

from typing import Optional

import tink


class KMSAEADError(tink.TinkError):
    """Base exception for all failures raised by this package.

    Deriving from :class:`tink.TinkError` lets Tink primitives layered on top,
    such as the KMS envelope AEAD, surface these failures unchanged.
    """


class ConfigError(KMSAEADError):
    """Raised when a configuration file cannot be loaded or validated"""


class InvalidKeyURIError(KMSAEADError, ValueError):
    """Raised when a key URI or prefix cannot be used to build a client"""


class UnsupportedKeyError(KMSAEADError):
    """Raised when a client is asked for a key it was not configured for"""

    def __init__(self, key_uri: str, prefix: str) -> None:
        super().__init__(f"key URI must start with prefix {prefix}, but got {key_uri}")
        self.key_uri = key_uri
        self.prefix = prefix


class NoClientFoundError(KMSAEADError):
    """Raised when no registered client claims a key URI"""

    def __init__(self, key_uri: str) -> None:
        super().__init__(f"no KMS client supports key URI {key_uri}")
        self.key_uri = key_uri


class RemoteCallError(KMSAEADError):
    """Raised when the remote KMS service or its transport rejects a call.

    The service's own error code and message are carried unchanged and the
    original SDK exception is available as ``__cause__``.
    """

    def __init__(self, message: str, *, operation: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.code = code


class CallCancelled(KMSAEADError):
    """Raised when the call scope attached to an adapter has been cancelled"""


class DeadlineExceeded(CallCancelled):
    """Raised when the call scope's deadline has passed"""


__all__ = [
    "KMSAEADError",
    "ConfigError",
    "InvalidKeyURIError",
    "UnsupportedKeyError",
    "NoClientFoundError",
    "RemoteCallError",
    "CallCancelled",
    "DeadlineExceeded",
]
