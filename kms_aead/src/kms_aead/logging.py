"""Structured logging setup for kms-aead."""
from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(level: str | None = None) -> None:
    """Emit JSON lines on stderr with ``ts``, ``level``, ``logger`` and ``msg``.

    Stdout is left alone because the CLI may write ciphertext there, and any
    bytes value bound to an event is replaced by its length.
    """

    numeric_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        handlers=[logging.StreamHandler(sys.stderr)],
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.EventRenamer("msg"),
            _mask_binary_values,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def _mask_binary_values(
    _logger: object, _name: str, event_dict: dict[str, object]
) -> dict[str, object]:
    for key, value in event_dict.items():
        if isinstance(value, (bytes, bytearray, memoryview)):
            event_dict[key] = f"<{len(value)} bytes>"
    return event_dict


__all__ = ["configure_logging"]
