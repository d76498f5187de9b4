from __future__ import annotations

import json
import math
from typing import Any, BinaryIO, Dict, Optional, Union

from dropkeys.core.errors import RecordDecodeError, RecordEncodeError
from dropkeys.core.keypaths import KeyPathIndex, is_terminal
from dropkeys.core.redaction import line_fingerprint


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"non-JSON constant {name!r}")


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number {text!r} is out of float range")
    return value


def decode_record(raw_line: Union[bytes, bytearray, str]) -> Any:
    try:
        return json.loads(raw_line, parse_float=_parse_float, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueError
        raise RecordDecodeError(f"Record is not valid JSON: {e}", **line_fingerprint(raw_line)) from e


def encode_record(value: Any) -> bytes:
    try:
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise RecordEncodeError(f"Filtered record could not be encoded: {e}", value_type=type(value).__name__) from e
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates ("\ud800") only survive as \u escapes
        return json.dumps(value, ensure_ascii=True, separators=(",", ":"), allow_nan=False).encode("ascii")


def drop_keys(value: Any, index: Optional[KeyPathIndex]) -> Any:
    """
    Return `value` with every key named by `index` removed.

    Only objects are walked. Arrays and scalars come back as-is, and nothing
    below a key that the index does not mention is touched.
    """
    if not index or not isinstance(value, dict):
        return value
    out: Dict[str, Any] = {}
    for key, child in value.items():
        if key not in index:
            out[key] = child
            continue
        sub = index[key]
        if is_terminal(sub):
            continue
        out[key] = drop_keys(child, sub)
    return out


def process_line(index: Optional[KeyPathIndex], raw_line: Union[bytes, bytearray, str], out: BinaryIO) -> int:
    """
    Decode one record, drop indexed keys, write the compact encoding to `out`.

    Nothing is written unless decoding and encoding both succeed; no newline is
    appended. Returns the number of bytes written.
    """
    value = decode_record(raw_line)
    data = encode_record(drop_keys(value, index))
    out.write(data)
    return len(data)
