"""Configuration loading for kms-aead."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .client import AWS_KMS_PREFIX, AwsKmsClient
from .exceptions import ConfigError
from .naming import DEFAULT_CONTEXT_NAME, EncryptionContextName
from .paths import project_config_file, user_config_dir
from .registry import KMSClientRegistry
from .scope import CallScope

BotoFactory = Callable[["KeyConfig"], Any]


class KeyConfig(BaseModel):
    uri_prefix: str = Field(description="Full key URI or prefix, e.g. aws-kms://arn:aws:kms:us-east-1:")
    region: Optional[str] = Field(default=None, description="Overrides the region parsed from the prefix")
    endpoint_url: Optional[str] = Field(default=None, description="Alternative KMS endpoint")
    encryption_context_name: EncryptionContextName = Field(default=DEFAULT_CONTEXT_NAME)
    timeout_seconds: Optional[float] = Field(default=None, gt=0)

    @field_validator("uri_prefix")
    @classmethod
    def _validate_prefix(cls, value: str) -> str:
        value = value.strip()
        if not value.lower().startswith(AWS_KMS_PREFIX):
            raise ValueError(f"uri_prefix must start with {AWS_KMS_PREFIX}")
        return value

    @field_validator("encryption_context_name", mode="before")
    @classmethod
    def _parse_context_name(cls, value: Any) -> EncryptionContextName:
        return EncryptionContextName.parse(value)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    keys: List[KeyConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield project_config_file()
    yield user_config_dir() / "config.yaml"


def load_config(path: Optional[Path] = None) -> AppConfig:
    if path is not None and not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")
    for candidate in config_search_paths(path):
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                try:
                    data = yaml.safe_load(handle) or {}
                except yaml.YAMLError as exc:
                    raise ConfigError(f"Invalid YAML in {candidate}: {exc}") from exc
            try:
                return AppConfig.model_validate(data)
            except ValidationError as exc:
                raise ConfigError(f"Invalid configuration in {candidate}: {exc}") from exc
    return DEFAULT_CONFIG.model_copy(deep=True)


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json"), handle, sort_keys=False)


def client_for(key: KeyConfig, scope: CallScope, boto_factory: Optional[BotoFactory] = None) -> AwsKmsClient:
    if key.timeout_seconds is not None:
        scope = scope.with_timeout(key.timeout_seconds)
    return AwsKmsClient(
        key.uri_prefix,
        scope=scope,
        boto_client=boto_factory(key) if boto_factory is not None else None,
        encryption_context_name=key.encryption_context_name,
        region=key.region,
        endpoint_url=key.endpoint_url,
    )


def build_registry(
    config: AppConfig,
    scope: Optional[CallScope] = None,
    boto_factory: Optional[BotoFactory] = None,
) -> KMSClientRegistry:
    """Register one client per configured key, in file order."""
    scope = scope or CallScope.background()
    registry = KMSClientRegistry()
    for key in config.keys:
        registry.register(client_for(key, scope, boto_factory))
    return registry


__all__ = [
    "AppConfig",
    "KeyConfig",
    "LoggingConfig",
    "DEFAULT_CONFIG",
    "build_registry",
    "client_for",
    "config_search_paths",
    "dump_default_config",
    "load_config",
]
