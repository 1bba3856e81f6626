from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import yaml


DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO", config_path: Path | None = None) -> None:
    """Configure logging from a YAML dictConfig file, or basicConfig without one."""
    if config_path is not None and config_path.exists():
        log_config = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        logging.config.dictConfig(log_config)
        logging.getLogger(__name__).info("Logging configured from %s", config_path)
        return

    logging.basicConfig(level=level, format=DEFAULT_FORMAT)
    if config_path is not None:
        logging.getLogger(__name__).warning(
            "Logging config %s not found; using basicConfig at %s", config_path, level
        )
