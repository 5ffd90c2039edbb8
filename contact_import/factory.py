"""Factory helpers for constructing contact stores from configuration."""
from __future__ import annotations

import importlib
from typing import Any, Dict

from .config import ConfigurationError, store_config
from .rate_limit import DelayPolicy, RateLimitedContactStore, RateLimiter


def _load_class(path: str):
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ConfigurationError(f"Invalid store class path '{path}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Store module '{module_name}' could not be imported: {exc}") from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ConfigurationError(f"Module '{module_name}' does not define '{attr}'") from exc


def build_contact_store(config: Dict[str, Any]) -> RateLimitedContactStore:
    """Instantiate the contact store defined in the configuration file."""

    store_cfg = store_config(config)
    class_path = store_cfg.get("class")
    if not class_path:
        raise ConfigurationError("Store configuration missing required 'class' field")

    options = store_cfg.get("options", {}) or {}
    store_cls = _load_class(class_path)
    try:
        store_instance = store_cls(**options)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid options for store '{class_path}': {exc}") from exc

    if not callable(getattr(store_instance, "upsert_contacts", None)):
        raise ConfigurationError(f"Store '{class_path}' does not implement upsert_contacts()")

    delay_seconds = float(store_cfg.get("delay_seconds", 0) or 0)
    calls_per_minute = store_cfg.get("rate_limit_per_minute")
    rate_limiter = RateLimiter(float(calls_per_minute)) if calls_per_minute else RateLimiter(None)

    return RateLimitedContactStore(
        store_instance,
        display_name=store_cfg.get("name"),
        delay_policy=DelayPolicy(delay_seconds=delay_seconds),
        rate_limiter=rate_limiter,
    )
