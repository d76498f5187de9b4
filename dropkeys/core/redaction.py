from __future__ import annotations

import hashlib
from typing import Any, Dict


REDACT_KEYS = {
    "passphrase",
    "password",
    "secret",
    "token",
    "api_key",
    "authorization",
}


def _redact(obj: Any) -> Any:
    if isinstance(obj, dict):
        out: Dict[str, Any] = {}
        for k, v in obj.items():
            if str(k).lower() in REDACT_KEYS:
                out[k] = "***REDACTED***"
            else:
                out[k] = _redact(v)
        return out
    if isinstance(obj, list):
        return [_redact(x) for x in obj]
    return obj


# Exported helper for error reports and log payloads
def redact(obj: Any) -> Any:
    return _redact(obj)


def hash8(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()[:8]


def line_fingerprint(raw: Any) -> Dict[str, Any]:
    """
    Content-free description of an input line: length + short hash.
    Record payloads may carry the very keys being dropped, so they never reach logs.
    """
    if isinstance(raw, str):
        raw = raw.encode("utf-8", errors="replace")
    data = bytes(raw or b"")
    return {"line_len": len(data), "line_hash8": hash8(data)}
