import dataclasses
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import dotenv_values

from .exceptions import ConfigError
from .logging_utils import log_event

logger = logging.getLogger("concatkit.core.config")

CONFIG_FILENAME = "concatkit.yml"
OVERRIDE_FILENAME = "concatkit.override.yml"
DOTENV_FILENAME = ".env"
ENV_PREFIX = "CONCATKIT_"

DEFAULT_CACHE_MAX_ENTRIES = 100
DEFAULT_CACHE_TTL_SECONDS = 5 * 60.0
DEFAULT_SLOW_OPTIMIZATION_MS = 5.0
DEFAULT_FINGERPRINT_ALGORITHM = "sha256"
DEFAULT_FINGERPRINT_LENGTH = 16

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclasses.dataclass(frozen=True)
class ConcatConfig:
    """Runtime settings for concatenation, optimization and rendering.

    ``debug`` adds diagnostic ``data-*`` attributes to rendered containers.
    ``development`` enables verbose optimizer diagnostics (slow-run and
    fingerprint-degradation logging).
    """

    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    debug: bool = False
    development: bool = False
    enable_optimization: bool = True
    slow_optimization_ms: float = DEFAULT_SLOW_OPTIMIZATION_MS
    fingerprint_algorithm: str = DEFAULT_FINGERPRINT_ALGORITHM
    fingerprint_length: int = DEFAULT_FINGERPRINT_LENGTH


def default_config() -> ConcatConfig:
    return ConcatConfig()


def _merge_defaults(
    base: Dict[str, Any], overrides: Mapping[str, Any]
) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def _load_root_config(root: Path) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    base = _load_yaml_dict(root / CONFIG_FILENAME)
    if base:
        merged = _merge_defaults(merged, base)
    override_path = root / OVERRIDE_FILENAME
    try:
        override = _load_yaml_dict(override_path)
    except ConfigError as exc:
        raise ConfigError(
            f"Invalid override config {override_path}; fix or delete it: {exc}"
        ) from exc
    if override:
        merged = _merge_defaults(merged, override)
    return merged


def _collect_env_overrides(
    root: Optional[Path], env: Optional[Mapping[str, str]]
) -> Dict[str, Any]:
    values: Dict[str, str] = {}
    if root is not None:
        dotenv_path = root / DOTENV_FILENAME
        if dotenv_path.exists():
            for key, value in dotenv_values(dotenv_path).items():
                if key and value is not None:
                    values[str(key)] = str(value)
    source = os.environ if env is None else env
    for key, value in source.items():
        values[key] = value

    overrides: Dict[str, Any] = {}
    field_names = {field.name for field in dataclasses.fields(ConcatConfig)}
    for key, value in values.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        if name in field_names:
            overrides[name] = value
    return overrides


def _parse_bool(value: Any, *, scope: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    raise ConfigError(f"{scope} must be boolean")


def _parse_positive_int(value: Any, *, scope: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{scope} must be a positive integer")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{scope} must be a positive integer") from exc
    if parsed <= 0:
        raise ConfigError(f"{scope} must be a positive integer")
    return parsed


def _parse_non_negative_float(value: Any, *, scope: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{scope} must be a non-negative number")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{scope} must be a non-negative number") from exc
    if parsed < 0:
        raise ConfigError(f"{scope} must be a non-negative number")
    return parsed


def parse_config(raw: Mapping[str, Any]) -> ConcatConfig:
    """Validate a raw mapping (YAML section or env overrides) into a config."""
    if not isinstance(raw, Mapping):
        raise ConfigError("concatkit config must be a mapping")
    cache_cfg = raw.get("cache", {})
    if cache_cfg is None:
        cache_cfg = {}
    if not isinstance(cache_cfg, Mapping):
        raise ConfigError("cache section must be a mapping if provided")
    defaults = default_config()

    max_entries_raw = raw.get(
        "cache_max_entries", cache_cfg.get("max_entries", defaults.cache_max_entries)
    )
    ttl_raw = raw.get(
        "cache_ttl_seconds", cache_cfg.get("ttl_seconds", defaults.cache_ttl_seconds)
    )
    algorithm = raw.get("fingerprint_algorithm", defaults.fingerprint_algorithm)
    if not isinstance(algorithm, str) or not algorithm.strip():
        raise ConfigError("fingerprint_algorithm must be a non-empty string")

    return ConcatConfig(
        cache_max_entries=_parse_positive_int(
            max_entries_raw, scope="cache.max_entries"
        ),
        cache_ttl_seconds=_parse_non_negative_float(
            ttl_raw, scope="cache.ttl_seconds"
        ),
        debug=_parse_bool(raw.get("debug", defaults.debug), scope="debug"),
        development=_parse_bool(
            raw.get("development", defaults.development), scope="development"
        ),
        enable_optimization=_parse_bool(
            raw.get("enable_optimization", defaults.enable_optimization),
            scope="enable_optimization",
        ),
        slow_optimization_ms=_parse_non_negative_float(
            raw.get("slow_optimization_ms", defaults.slow_optimization_ms),
            scope="slow_optimization_ms",
        ),
        fingerprint_algorithm=algorithm.strip().lower(),
        fingerprint_length=_parse_positive_int(
            raw.get("fingerprint_length", defaults.fingerprint_length),
            scope="fingerprint_length",
        ),
    )


def load_config(
    root: Optional[Path] = None, *, env: Optional[Mapping[str, str]] = None
) -> ConcatConfig:
    """Load config from ``root`` YAML files, then ``.env`` and environment.

    Precedence, lowest first: defaults, ``concatkit.yml``,
    ``concatkit.override.yml``, ``.env``, ``env`` (``os.environ`` when
    omitted). Environment keys use the ``CONCATKIT_`` prefix, for example
    ``CONCATKIT_DEBUG=1``.
    """
    raw: Dict[str, Any] = {}
    if root is not None:
        raw = _load_root_config(Path(root))
    env_overrides = _collect_env_overrides(
        Path(root) if root is not None else None, env
    )
    if env_overrides:
        raw = _merge_defaults(raw, env_overrides)
    config = parse_config(raw)
    log_event(
        logger,
        logging.DEBUG,
        "concat.config.loaded",
        root=str(root) if root is not None else None,
        env_overrides=sorted(env_overrides),
        debug=config.debug,
        development=config.development,
    )
    return config
