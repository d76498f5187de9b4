from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from dropkeys.core.config.io import read_json_file
from dropkeys.core.config.models import DropKeysConfig
from dropkeys.core.errors import ConfigError, KeyListSyntaxError
from dropkeys.core.literal_array import parse_single_quoted_array


ENV_PREFIX = "DROPKEYS_"


def _env_layer(environ: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    raw_keys = environ.get(ENV_PREFIX + "KEYS")
    if raw_keys:
        try:
            out["keys"] = parse_single_quoted_array(raw_keys)
        except KeyListSyntaxError as e:
            raise ConfigError(f"{ENV_PREFIX}KEYS: {e.user_message}", source="env") from e
    on_error = environ.get(ENV_PREFIX + "ON_ERROR")
    if on_error:
        out["on_error"] = on_error.strip().lower()
    log_level = environ.get(ENV_PREFIX + "LOG_LEVEL")
    if log_level:
        out["log_level"] = log_level
    return out


def load_config(
    path: Optional[str] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DropKeysConfig:
    """
    Build the effective config. Precedence: defaults < file < environment < overrides.
    """
    merged: Dict[str, Any] = {}
    if path:
        rr = read_json_file(path)
        if not rr.ok:
            raise ConfigError(f"Cannot read config file: {rr.error}", path=path)
        merged.update(rr.data)
    merged.update(_env_layer(os.environ if environ is None else environ))
    for k, v in (overrides or {}).items():
        if v is not None:
            merged[k] = v
    try:
        return DropKeysConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e.error_count()} error(s).", errors=[err.get("msg") for err in e.errors()]) from e
