"""Ordered registry resolving key URIs to KMS clients."""
from __future__ import annotations

import threading
from typing import List, Tuple

import structlog
import tink
from tink import aead as tink_aead

from .exceptions import NoClientFoundError

logger = structlog.get_logger(__name__)


class KMSClientRegistry:
    """Runtime registry of Tink KMS clients, consulted in registration order.

    Instances are passed explicitly to whatever needs to resolve remote keys,
    such as an envelope-encryption primitive wrapping its data keys.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._clients: List[tink.KmsClient] = []

    def register(self, client: tink.KmsClient) -> None:
        with self._lock:
            self._clients.append(client)
        logger.info("registry.register", client=repr(client))

    def clear_all(self) -> None:
        with self._lock:
            self._clients.clear()
        logger.info("registry.clear")

    def clients(self) -> Tuple[tink.KmsClient, ...]:
        with self._lock:
            return tuple(self._clients)

    def get_client(self, key_uri: str) -> tink.KmsClient:
        for client in self.clients():
            if client.does_support(key_uri):
                return client
        logger.info("registry.miss", key_uri=key_uri)
        raise NoClientFoundError(key_uri)

    def get_aead(self, key_uri: str) -> tink_aead.Aead:
        return self.get_client(key_uri).get_aead(key_uri)

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)


__all__ = ["KMSClientRegistry"]
