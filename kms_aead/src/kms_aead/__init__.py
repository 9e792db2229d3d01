"""Expose AWS KMS keys as AEAD primitives."""
from .aead import RemoteAead
from .client import AWS_KMS_PREFIX, AwsKmsClient, KMSClient, region_from_key_uri
from .exceptions import (
    CallCancelled,
    ConfigError,
    DeadlineExceeded,
    InvalidKeyURIError,
    KMSAEADError,
    NoClientFoundError,
    RemoteCallError,
    UnsupportedKeyError,
)
from .naming import EncryptionContextName
from .registry import KMSClientRegistry
from .remote import BotoCryptable, Cryptable, DecryptRequest, EncryptRequest
from .scope import CallScope
from .version import __version__

__all__ = [
    "RemoteAead",
    "AWS_KMS_PREFIX",
    "AwsKmsClient",
    "KMSClient",
    "region_from_key_uri",
    "CallCancelled",
    "ConfigError",
    "DeadlineExceeded",
    "InvalidKeyURIError",
    "KMSAEADError",
    "NoClientFoundError",
    "RemoteCallError",
    "UnsupportedKeyError",
    "EncryptionContextName",
    "KMSClientRegistry",
    "BotoCryptable",
    "Cryptable",
    "DecryptRequest",
    "EncryptRequest",
    "CallScope",
    "__version__",
]
