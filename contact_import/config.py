"""Configuration helpers for the contact import pipeline."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .ingestion.parser import CSV_MODES
from .orchestrator.batching import DEFAULT_BATCH_SIZE

LOGGER = logging.getLogger(__name__)

DEFAULT_STORE_CLASS = "contact_import.stores.memory.InMemoryContactStore"


class ConfigurationError(RuntimeError):
    """Raised when configuration files are missing or malformed."""


_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    try:
        if file_path.suffix.lower() == ".json":
            data = json.loads(text) if text.strip() else {}
        else:
            data = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Configuration file '{file_path}' could not be parsed: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping at the top level")
    return data


@dataclass(frozen=True)
class ImportSettings:
    """Validated ``import`` section of the configuration."""

    batch_size: int = DEFAULT_BATCH_SIZE
    csv_mode: str = "quoted"

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "ImportSettings":
        section = (config or {}).get("import") or {}
        if not isinstance(section, dict):
            raise ConfigurationError("The 'import' section must be a mapping")

        batch_size = section.get("batch_size", DEFAULT_BATCH_SIZE)
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise ConfigurationError(f"'import.batch_size' must be a positive integer, got {batch_size!r}")

        csv_mode = str(section.get("csv_mode", "quoted")).lower()
        if csv_mode not in CSV_MODES:
            raise ConfigurationError(f"'import.csv_mode' must be one of {list(CSV_MODES)}, got {csv_mode!r}")

        return cls(batch_size=batch_size, csv_mode=csv_mode)

    def override(self, *, batch_size: Optional[int] = None, csv_mode: Optional[str] = None) -> "ImportSettings":
        """Return settings with command line overrides applied and validated."""

        merged = {
            "batch_size": batch_size if batch_size is not None else self.batch_size,
            "csv_mode": csv_mode if csv_mode is not None else self.csv_mode,
        }
        return ImportSettings.from_config({"import": merged})


def store_config(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Return the ``store`` section, defaulting to the in-memory store."""

    section = (config or {}).get("store")
    if section is None:
        LOGGER.debug("No store configured; using %s", DEFAULT_STORE_CLASS)
        return {"class": DEFAULT_STORE_CLASS}
    if not isinstance(section, dict):
        raise ConfigurationError("The 'store' section must be a mapping")
    return section
