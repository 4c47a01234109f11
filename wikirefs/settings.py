from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QSettings

APP_NAME = "wikirefs"
APP_DIR = Path.home() / f".{APP_NAME}"
LOG_DIR = APP_DIR / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"
CONFIG_PATH = APP_DIR / f"{APP_NAME}.ini"
DEFAULT_VAULT_DIR = APP_DIR / "pages"


@dataclass(frozen=True)
class SettingsKeys:
    STORAGE_PROVIDER: str = "storage/provider"
    VAULT_DIR: str = "storage/vault_dir"
    MATCH_PLURALS: str = "references/match_english_plurals"
    CAMEL_CASE: str = "links/camel_case"
    ATTACHMENTS_ENABLED: str = "attachments/enabled"
    DEFAULT_AUTHOR: str = "rename/default_author"


KEYS = SettingsKeys()


@dataclass(frozen=True)
class WikiConfig:
    storage_provider: str = "filesystem"
    vault_dir: Path = DEFAULT_VAULT_DIR
    match_english_plurals: bool = False
    camel_case_links: bool = False
    attachments_enabled: bool = True
    default_author: str = ""


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_bool(settings: QSettings, key: str, default: bool) -> bool:
    try:
        val = settings.value(key, default)
    except Exception:
        return default
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    text = str(val).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    return default


def open_settings(path: Path | None = None) -> QSettings:
    return QSettings(str(path or CONFIG_PATH), QSettings.IniFormat)


def load_config(path: Path | None = None) -> WikiConfig:
    """
    Read the INI config. Missing file or missing keys fall back to defaults.
    """
    settings = open_settings(path)
    defaults = WikiConfig()
    return WikiConfig(
        storage_provider=get_str(settings, KEYS.STORAGE_PROVIDER, defaults.storage_provider).strip().lower(),
        vault_dir=Path(get_str(settings, KEYS.VAULT_DIR, str(defaults.vault_dir))).expanduser(),
        match_english_plurals=get_bool(settings, KEYS.MATCH_PLURALS, defaults.match_english_plurals),
        camel_case_links=get_bool(settings, KEYS.CAMEL_CASE, defaults.camel_case_links),
        attachments_enabled=get_bool(settings, KEYS.ATTACHMENTS_ENABLED, defaults.attachments_enabled),
        default_author=get_str(settings, KEYS.DEFAULT_AUTHOR, defaults.default_author),
    )


def save_config(config: WikiConfig, path: Path | None = None) -> None:
    settings = open_settings(path)
    settings.setValue(KEYS.STORAGE_PROVIDER, config.storage_provider)
    settings.setValue(KEYS.VAULT_DIR, str(config.vault_dir))
    settings.setValue(KEYS.MATCH_PLURALS, config.match_english_plurals)
    settings.setValue(KEYS.CAMEL_CASE, config.camel_case_links)
    settings.setValue(KEYS.ATTACHMENTS_ENABLED, config.attachments_enabled)
    settings.setValue(KEYS.DEFAULT_AUTHOR, config.default_author)
    settings.sync()
