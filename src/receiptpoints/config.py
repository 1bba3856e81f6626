from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import ConfigError


STORE_BACKENDS = ("memory", "json")

_ENV_PREFIX = "RECEIPTPOINTS_"
_KEYS = ("store", "data_dir", "host", "port", "log_level", "logging_config")


def _resolve(base: Path, value: str) -> Path:
    candidate = Path(value)
    if candidate.is_absolute():
        return candidate
    return (base / candidate).resolve()


@dataclass(frozen=True, slots=True)
class Settings:
    store: str = "memory"
    data_dir: Path = Path("data")
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    logging_config: Path | None = None

    @classmethod
    def detect(cls, environ: Mapping[str, str] | None = None, *, cwd: Path | None = None) -> "Settings":
        """Build settings from defaults, an optional YAML file and the environment.

        ``RECEIPTPOINTS_CONFIG`` names the YAML file. Every key it may hold
        can be overridden by the matching ``RECEIPTPOINTS_*`` variable; the
        port additionally falls back to ``PORT``.
        """
        env = os.environ if environ is None else environ
        base = (cwd or Path.cwd()).resolve()

        raw: dict[str, object] = {}
        config_file = env.get(f"{_ENV_PREFIX}CONFIG")
        if config_file:
            raw.update(load_config_file(_resolve(base, config_file)))

        if "port" not in raw and env.get("PORT"):
            raw["port"] = env["PORT"]
        for key in _KEYS:
            value = env.get(f"{_ENV_PREFIX}{key.upper()}")
            if value:
                raw[key] = value

        return cls.from_mapping(raw, base=base)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object], *, base: Path) -> "Settings":
        unknown = sorted(set(raw) - set(_KEYS))
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

        defaults = cls()

        store = str(raw.get("store") or defaults.store).strip().lower()
        if store not in STORE_BACKENDS:
            raise ConfigError(f"Unknown store backend {store!r}; expected one of {', '.join(STORE_BACKENDS)}.")

        port_value = raw.get("port", defaults.port)
        try:
            port = int(str(port_value))
        except ValueError as exc:
            raise ConfigError(f"Port must be an integer, got {port_value!r}.") from exc

        logging_config = raw.get("logging_config")

        return cls(
            store=store,
            data_dir=_resolve(base, str(raw.get("data_dir") or defaults.data_dir)),
            host=str(raw.get("host") or defaults.host),
            port=port,
            log_level=str(raw.get("log_level") or defaults.log_level).upper(),
            logging_config=_resolve(base, str(logging_config)) if logging_config else None,
        )


def load_config_file(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping at {path}, got {type(data).__name__}.")
    return data
