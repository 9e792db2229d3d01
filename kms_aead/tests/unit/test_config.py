from pathlib import Path

import pytest
import yaml

from conftest import KEY_PREFIX, KEY_URI
from kms_aead.config import AppConfig, KeyConfig, build_registry, dump_default_config, load_config
from kms_aead.exceptions import ConfigError, DeadlineExceeded, NoClientFoundError
from kms_aead.naming import EncryptionContextName
from kms_aead.scope import CallScope
from kms_aead.testing.fake_kms import FakeKMS


def _write(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_load_explicit_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.yaml",
        {
            "keys": [
                {"uri_prefix": KEY_PREFIX, "encryption_context_name": "associatedData", "timeout_seconds": 10},
            ],
            "logging": {"level": "debug"},
        },
    )
    config = load_config(path)
    assert config.keys[0].uri_prefix == KEY_PREFIX
    assert config.keys[0].encryption_context_name is EncryptionContextName.ASSOCIATED_DATA
    assert config.keys[0].timeout_seconds == 10
    assert config.logging.normalized_level() == "DEBUG"


def test_project_config_is_discovered(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".kms-aead").mkdir()
    _write(tmp_path / ".kms-aead" / "config.yaml", {"keys": [{"uri_prefix": KEY_URI}]})
    assert load_config().keys[0].uri_prefix == KEY_URI


def test_missing_explicit_config_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "key",
    [
        {"uri_prefix": "gcp-kms://projects/p"},
        {"uri_prefix": KEY_PREFIX, "encryption_context_name": "aad"},
        {"uri_prefix": KEY_PREFIX, "timeout_seconds": 0},
    ],
)
def test_invalid_key_entries_are_rejected(tmp_path: Path, key) -> None:
    path = _write(tmp_path / "config.yaml", {"keys": [key]})
    with pytest.raises(ConfigError):
        load_config(path)


def test_malformed_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("keys: [unterminated", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_default_config_round_trips_through_yaml(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "config.yaml"
    dump_default_config(target)
    assert load_config(target) == AppConfig()


def test_build_registry_registers_keys_in_order() -> None:
    fake = FakeKMS()
    config = AppConfig(
        keys=[
            KeyConfig(uri_prefix="aws-kms://arn:aws:kms:eu-west-1:1:"),
            KeyConfig(uri_prefix=KEY_PREFIX, encryption_context_name="associatedData"),
        ]
    )
    registry = build_registry(config, boto_factory=lambda key: fake)
    prefixes = [client.key_uri_prefix for client in registry.clients()]
    assert prefixes == ["aws-kms://arn:aws:kms:eu-west-1:1:", KEY_PREFIX]

    aead = registry.get_aead(KEY_URI)
    assert aead.context_name is EncryptionContextName.ASSOCIATED_DATA
    assert aead.decrypt(aead.encrypt(b"pt", b"ad"), b"ad") == b"pt"
    with pytest.raises(NoClientFoundError):
        registry.get_aead("aws-kms://arn:aws:kms:ap-south-1:1:key/z")


def test_key_timeout_derives_child_scope() -> None:
    now = [0.0]
    scope = CallScope(clock=lambda: now[0])
    config = AppConfig(keys=[KeyConfig(uri_prefix=KEY_PREFIX, timeout_seconds=5)])
    registry = build_registry(config, scope=scope, boto_factory=lambda key: FakeKMS())
    aead = registry.get_aead(KEY_URI)
    assert aead.scope.deadline == 5.0
    now[0] = 6.0
    with pytest.raises(DeadlineExceeded):
        aead.encrypt(b"pt", b"ad")
    assert not scope.cancelled
