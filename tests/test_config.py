from __future__ import annotations

from pathlib import Path

import pytest

from fastbootctl.core.config import DEFAULT_POLL_INTERVAL_S, config_path, load_settings
from fastbootctl.core.errors import ConfigError
from fastbootctl.core.model import MatchFilter


def _write_config(root: Path, content: str) -> Path:
    path = root / "fastbootctl" / "config.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults_without_file(tmp_path: Path) -> None:
    settings = load_settings({"XDG_CONFIG_HOME": str(tmp_path)})
    assert settings.serial is None
    assert settings.vendor_id is None
    assert settings.poll_interval_s == DEFAULT_POLL_INTERVAL_S
    assert settings.base_filter() == MatchFilter()


def test_config_path_prefers_explicit_env(tmp_path: Path) -> None:
    explicit = tmp_path / "custom.yaml"
    assert config_path({"FASTBOOTCTL_CONFIG": str(explicit), "XDG_CONFIG_HOME": "/nowhere"}) == explicit
    assert config_path({"XDG_CONFIG_HOME": str(tmp_path)}) == tmp_path / "fastbootctl/config.yaml"


def test_android_serial_env_sets_default(tmp_path: Path) -> None:
    settings = load_settings({"XDG_CONFIG_HOME": str(tmp_path), "ANDROID_SERIAL": "ENV123"})
    assert settings.base_filter() == MatchFilter(serial="ENV123")


def test_config_file_values(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "serial: CFG1\nvendor_id: '0x2717'\npoll_interval_s: 0.5\n")

    settings = load_settings({"XDG_CONFIG_HOME": str(tmp_path)})

    assert settings.serial == "CFG1"
    assert settings.vendor_id == 0x2717
    assert settings.poll_interval_s == 0.5
    assert settings.source == path


def test_integer_vendor_id(tmp_path: Path) -> None:
    _write_config(tmp_path, "vendor_id: 4660\n")
    assert load_settings({"XDG_CONFIG_HOME": str(tmp_path)}).vendor_id == 0x1234


def test_env_serial_overrides_config(tmp_path: Path) -> None:
    _write_config(tmp_path, "serial: CFG1\n")
    settings = load_settings({"XDG_CONFIG_HOME": str(tmp_path), "ANDROID_SERIAL": "ENV"})
    assert settings.serial == "ENV"


def test_unknown_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "vendors: [1, 2]\n")
    with pytest.raises(ConfigError):
        load_settings({"XDG_CONFIG_HOME": str(tmp_path)})


def test_bad_vendor_string_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "vendor_id: zzz\n")
    with pytest.raises(ConfigError) as exc:
        load_settings({"XDG_CONFIG_HOME": str(tmp_path)})
    assert "vendor_id" in str(exc.value)


def test_non_positive_poll_interval_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "poll_interval_s: 0\n")
    with pytest.raises(ConfigError):
        load_settings({"XDG_CONFIG_HOME": str(tmp_path)})


def test_duplicate_keys_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "serial: A\nserial: B\n")
    with pytest.raises(ConfigError):
        load_settings({"XDG_CONFIG_HOME": str(tmp_path)})


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    _write_config(tmp_path, "")
    assert load_settings({"XDG_CONFIG_HOME": str(tmp_path)}).base_filter() == MatchFilter()


def test_missing_explicit_config_is_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings({"FASTBOOTCTL_CONFIG": str(tmp_path / "absent.yaml")})
