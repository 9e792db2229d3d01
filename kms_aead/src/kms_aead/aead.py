"""AEAD primitive backed by a remote KMS key."""
from __future__ import annotations

from typing import Dict, Optional

import structlog
from tink import aead as tink_aead

from .naming import EncryptionContextName
from .remote import Cryptable, DecryptRequest, EncryptRequest
from .scope import CallScope

logger = structlog.get_logger(__name__)


class RemoteAead(tink_aead.Aead):
    """AEAD whose key never leaves the KMS.

    KMS Encrypt/Decrypt have no associated-data parameter, so the associated
    data is hex-encoded into the encryption context under a single name and
    the service authenticates it as part of the ciphertext. Empty and ``None``
    associated data both leave the context out of the request.
    """

    __slots__ = ("_scope", "_key_id", "_kms", "_context_name")

    def __init__(
        self,
        scope: CallScope,
        key_id: str,
        kms: Cryptable,
        context_name: EncryptionContextName,
    ) -> None:
        self._scope = scope
        self._key_id = key_id
        self._kms = kms
        self._context_name = EncryptionContextName.parse(context_name)

    @property
    def key_id(self) -> str:
        return self._key_id

    @property
    def context_name(self) -> EncryptionContextName:
        return self._context_name

    @property
    def scope(self) -> CallScope:
        return self._scope

    def encryption_context(self, associated_data: Optional[bytes]) -> Optional[Dict[str, str]]:
        if not associated_data:
            return None
        return {str(self._context_name): bytes(associated_data).hex()}

    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        context = self.encryption_context(associated_data)
        logger.debug("kms.encrypt", key_id=self._key_id, bound_context=context is not None)
        request = EncryptRequest(key_id=self._key_id, plaintext=plaintext, encryption_context=context)
        return self._kms.encrypt(self._scope, request).ciphertext_blob

    def decrypt(self, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        context = self.encryption_context(associated_data)
        logger.debug("kms.decrypt", key_id=self._key_id, bound_context=context is not None)
        request = DecryptRequest(key_id=self._key_id, ciphertext_blob=ciphertext, encryption_context=context)
        return self._kms.decrypt(self._scope, request).plaintext

    def __repr__(self) -> str:
        return f"RemoteAead(key_id={self._key_id!r}, context_name={self._context_name.value!r})"


__all__ = ["RemoteAead"]
