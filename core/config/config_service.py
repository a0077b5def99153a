"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import configparser
import os
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Optional, Tuple, get_type_hints

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

def _find_project_root() -> Path:
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "core").is_dir() and (parent / "premium_clock").is_dir():
            return parent
    return here.parent

PROJECT_ROOT = _find_project_root()
CONFIG_DIR = PROJECT_ROOT / "core" / "config"
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
MACHINE_INI = CONFIG_DIR / "config.ini"

ENV_PREFIX = "STANDBY_"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "General": {
        "app_name": "StandBy Clock",
        "version": "1.0.0",
    },
    "Storage": {
        "backend": "file",
        "base_dir": (Path.home() / ".standby-clock" / "shared").as_posix(),
        "app_group_id": "group.com.jakedev.jakeswidgets",
        "config_key": "premiumClockConfig",
    },
    "Widget": {
        "timeline_entries": "20",
        "width": "338",
        "height": "158",
        "output": (Path.home() / ".standby-clock" / "widget.png").as_posix(),
    },
    "Preview": {
        "tick_ms": "1000",
        "width": "360",
        "height": "120",
    },
    "Logging": {
        "level": "INFO",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class GeneralConfig:
    app_name: str = ""
    version: str = ""


@dataclass
class StorageConfig:
    backend: str = "file"
    base_dir: Path = Path(".")
    app_group_id: str = ""
    config_key: str = "premiumClockConfig"


@dataclass
class WidgetConfig:
    timeline_entries: int = 20
    width: int = 338
    height: int = 158
    output: Path = Path("widget.png")


@dataclass
class PreviewConfig:
    tick_ms: int = 1000
    width: int = 360
    height: int = 120


@dataclass
class LoggingConfig:
    level: str = "INFO"


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _read_ini(path: Path) -> Dict[str, Dict[str, Any]]:
    cp = configparser.ConfigParser()
    cp.read(path, encoding="utf-8")
    return _cp_to_dict(cp)


def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _cast(value: Any, typ: type) -> Any:
    if typ is Path:
        return Path(str(value)).expanduser()
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ is int:
        return int(value)
    if typ is float:
        return float(value)
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    hints = get_type_hints(cls)
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        kwargs[field.name] = _cast(val, hints[field.name])
    return cls(**kwargs)


def _env_overlays(environ: Optional[Dict[str, str]] = None) -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in (os.environ if environ is None else environ).items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "StandByClock" / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "standby-clock" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety.

    Precedence (lowest first): embedded defaults, ``defaults.ini``,
    ``STANDBY_<SECTION>__<KEY>`` environment variables, the machine
    ``config.ini`` and finally the per-user config file.
    """

    def __init__(
        self,
        *,
        defaults_ini: Path = DEFAULTS_INI,
        machine_ini: Path = MACHINE_INI,
        user_ini: Optional[Path] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> None:
        self._lock = RLock()
        self._defaults_ini = defaults_ini
        self._machine_ini = machine_ini
        self._user_ini = user_ini if user_ini is not None else _user_config_path()
        self._environ = environ
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if self._defaults_ini.exists():
                _apply(merged, _read_ini(self._defaults_ini), "defaults.ini",
                       str(self._defaults_ini), sources)

            # Layer 2: environment variables
            _apply(merged, _env_overlays(self._environ), "env", "os.environ", sources)

            # Layer 3: machine config
            if self._machine_ini.exists():
                _apply(merged, _read_ini(self._machine_ini), "machine",
                       str(self._machine_ini), sources)

            # Layer 4: user overrides
            if self._user_ini.exists():
                _apply(merged, _read_ini(self._user_ini), "user", str(self._user_ini), sources)

            self._merged = merged
            self._sources = sources

            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))
            self.storage = _build_dataclass(StorageConfig, merged.get("Storage", {}))
            self.widget = _build_dataclass(WidgetConfig, merged.get("Widget", {}))
            self.preview = _build_dataclass(PreviewConfig, merged.get("Preview", {}))
            self.logging = _build_dataclass(LoggingConfig, merged.get("Logging", {}))

    # ------------------------------------------------------------------ #
    def get(self, section: str, key: str, *, cast: Callable[[Any], Any] | type = str) -> Any:
        val = self._merged.get(section, {}).get(key)
        if val is None:
            return None
        if isinstance(cast, type):
            return _cast(val, cast)
        return cast(val)

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


_service: Optional[ConfigService] = None
_service_lock = RLock()


def get_config_service() -> ConfigService:
    """Return the process-wide application config, built on first use."""
    global _service
    with _service_lock:
        if _service is None:
            _service = ConfigService()
        return _service
