"""Narrow capability over the KMS Encrypt/Decrypt API."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import RemoteCallError
from .scope import CallScope

logger = structlog.get_logger(__name__)

# how often a waiting caller re-checks its scope
SCOPE_POLL_INTERVAL = 0.05
CONNECT_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class EncryptRequest:
    key_id: str
    plaintext: bytes
    encryption_context: Optional[Mapping[str, str]] = None

    def to_boto_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"KeyId": self.key_id, "Plaintext": self.plaintext}
        if self.encryption_context is not None:
            kwargs["EncryptionContext"] = dict(self.encryption_context)
        return kwargs


@dataclass(frozen=True, slots=True)
class DecryptRequest:
    key_id: str
    ciphertext_blob: bytes
    encryption_context: Optional[Mapping[str, str]] = None

    def to_boto_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"KeyId": self.key_id, "CiphertextBlob": self.ciphertext_blob}
        if self.encryption_context is not None:
            kwargs["EncryptionContext"] = dict(self.encryption_context)
        return kwargs


@dataclass(frozen=True, slots=True)
class EncryptResponse:
    ciphertext_blob: bytes
    key_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DecryptResponse:
    plaintext: bytes
    key_id: Optional[str] = None


@runtime_checkable
class Cryptable(Protocol):
    """Remote cryptography capability consumed by :class:`~kms_aead.aead.RemoteAead`."""

    def encrypt(self, scope: CallScope, request: EncryptRequest) -> EncryptResponse:  # pragma: no cover - protocol
        ...

    def decrypt(self, scope: CallScope, request: DecryptRequest) -> DecryptResponse:  # pragma: no cover - protocol
        ...


class BotoCryptable:
    """:class:`Cryptable` backed by a boto3 ``kms`` client.

    Requests run on a worker thread while the caller waits on its scope, so
    cancelling the scope or reaching its deadline releases the caller at once.
    The abandoned request is left to finish in the background and its result
    is dropped.
    """

    __slots__ = ("_client", "_executor")

    def __init__(self, client: Any, *, max_workers: Optional[int] = None) -> None:
        if client is None:
            raise ValueError("client cannot be None")
        self._client = client
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="kms-call")

    @property
    def client(self) -> Any:
        return self._client

    def close(self) -> None:
        self._executor.shutdown(wait=False)

    def encrypt(self, scope: CallScope, request: EncryptRequest) -> EncryptResponse:
        resp = self._call("Encrypt", self._client.encrypt, scope, request.to_boto_kwargs())
        return EncryptResponse(ciphertext_blob=resp["CiphertextBlob"], key_id=resp.get("KeyId"))

    def decrypt(self, scope: CallScope, request: DecryptRequest) -> DecryptResponse:
        resp = self._call("Decrypt", self._client.decrypt, scope, request.to_boto_kwargs())
        return DecryptResponse(plaintext=resp["Plaintext"], key_id=resp.get("KeyId"))

    def _call(self, operation: str, method: Any, scope: CallScope, kwargs: Dict[str, Any]) -> Mapping[str, Any]:
        scope.raise_if_done()
        future = self._executor.submit(method, **kwargs)
        while True:
            remaining = scope.remaining()
            wait = SCOPE_POLL_INTERVAL if remaining is None else min(SCOPE_POLL_INTERVAL, remaining)
            try:
                resp = future.result(timeout=wait)
                break
            except FutureTimeout:
                err = scope.error()
                if err is not None:
                    future.cancel()
                    logger.info("kms.call_abandoned", operation=operation, key_id=kwargs.get("KeyId"), reason=str(err))
                    raise err from None
            except ClientError as exc:
                code = exc.response.get("Error", {}).get("Code")
                logger.warning("kms.remote_error", operation=operation, code=code, key_id=kwargs.get("KeyId"))
                raise RemoteCallError(str(exc), operation=operation, code=code) from exc
            except BotoCoreError as exc:
                logger.warning("kms.remote_error", operation=operation, error=type(exc).__name__, key_id=kwargs.get("KeyId"))
                raise RemoteCallError(str(exc), operation=operation) from exc
        scope.raise_if_done()
        return resp


def new_boto_kms(
    region: Optional[str],
    endpoint_url: Optional[str] = None,
    session: Any = None,
    *,
    timeout: Optional[float] = None,
) -> Any:
    """Create a boto3 KMS client using the default credential chain.

    ``timeout`` bounds connect and read time on the socket, so a deadline
    also stops the request itself rather than only the caller's wait.
    """
    factory = session.client if session is not None else boto3.client
    kwargs: Dict[str, Any] = {"region_name": region}
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    if timeout is not None and timeout > 0:
        kwargs["config"] = Config(connect_timeout=min(CONNECT_TIMEOUT, timeout), read_timeout=timeout)
    return factory("kms", **kwargs)


__all__ = [
    "Cryptable",
    "BotoCryptable",
    "EncryptRequest",
    "DecryptRequest",
    "EncryptResponse",
    "DecryptResponse",
    "new_boto_kms",
]
