"""KMS clients that hand out :class:`~kms_aead.aead.RemoteAead` primitives."""
from __future__ import annotations

import re
from typing import Any, Optional

import structlog
import tink

from .aead import RemoteAead
from .exceptions import InvalidKeyURIError, UnsupportedKeyError
from .naming import DEFAULT_CONTEXT_NAME, EncryptionContextName
from .remote import BotoCryptable, Cryptable, new_boto_kms
from .scope import CallScope

logger = structlog.get_logger(__name__)

AWS_KMS_PREFIX = "aws-kms://"

_ARN_REGION = re.compile(r"arn:(aws[a-zA-Z0-9\-_]*):kms:([a-z0-9\-]+):")

KMSClient = tink.KmsClient


def region_from_key_uri(key_uri: str) -> str:
    """Extract the AWS region from ``aws-kms://arn:<partition>:kms:<region>:...``."""
    match = _ARN_REGION.search(key_uri)
    if match is None:
        raise InvalidKeyURIError(f"extracting region from key URI failed: {key_uri}")
    return match.group(2)


class AwsKmsClient(tink.KmsClient):
    """Tink KMS client for keys under a single ``aws-kms://`` URI prefix.

    ``key_uri_prefix`` may be a full key URI or a shorter prefix (account,
    region, partition) covering many keys. Exactly one of ``kms`` (a ready
    :class:`~kms_aead.remote.Cryptable`) and ``boto_client`` may be given;
    with neither, a boto3 client is created for ``region`` or, failing that,
    the region in the prefix. Its socket timeouts follow the scope's deadline.
    """

    def __init__(
        self,
        key_uri_prefix: str,
        *,
        scope: Optional[CallScope] = None,
        kms: Optional[Cryptable] = None,
        boto_client: Any = None,
        encryption_context_name: Optional[EncryptionContextName] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        if not key_uri_prefix.lower().startswith(AWS_KMS_PREFIX):
            raise InvalidKeyURIError(f"key URI prefix must start with {AWS_KMS_PREFIX}, but got {key_uri_prefix}")
        if kms is not None and boto_client is not None:
            raise ValueError("pass either kms or boto_client, not both")
        scope = scope or CallScope.background()
        if kms is None:
            if boto_client is None:
                boto_client = new_boto_kms(
                    region or region_from_key_uri(key_uri_prefix),
                    endpoint_url,
                    timeout=scope.remaining(),
                )
            kms = BotoCryptable(boto_client)

        self._prefix = key_uri_prefix
        self._scope = scope
        self._kms = kms
        self._context_name = EncryptionContextName.parse(encryption_context_name or DEFAULT_CONTEXT_NAME)
        logger.debug("client.created", prefix=key_uri_prefix, context_name=self._context_name.value)

    @property
    def key_uri_prefix(self) -> str:
        return self._prefix

    @property
    def encryption_context_name(self) -> EncryptionContextName:
        return self._context_name

    def does_support(self, key_uri: str) -> bool:
        return key_uri.startswith(self._prefix)

    supports = does_support

    def get_aead(self, key_uri: str) -> RemoteAead:
        if not self.does_support(key_uri):
            raise UnsupportedKeyError(key_uri, self._prefix)
        key_id = key_uri[len(AWS_KMS_PREFIX):]
        return RemoteAead(self._scope, key_id, self._kms, self._context_name)

    def __repr__(self) -> str:
        return f"AwsKmsClient(prefix={self._prefix!r})"


__all__ = ["KMSClient", "AwsKmsClient", "AWS_KMS_PREFIX", "region_from_key_uri"]
