from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, BinaryIO, Dict, Iterable, Optional

from dropkeys.core.errors import DropKeysError
from dropkeys.core.error_reporter import ErrorReporter
from dropkeys.core.filtering import process_line
from dropkeys.core.keypaths import KeyPathIndex
from dropkeys.core.redaction import line_fingerprint


ON_ERROR_POLICIES = ("abort", "skip")


@dataclass
class StreamStats:
    lines_read: int = 0
    records_written: int = 0
    records_failed: int = 0
    blank_lines: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _strip_eol(raw: bytes) -> bytes:
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n"):
        return raw[:-1]
    return raw


def run_stream(
    index: Optional[KeyPathIndex],
    source: Iterable[bytes],
    sink: BinaryIO,
    *,
    on_error: str = "abort",
    skip_blank_lines: bool = True,
    reporter: Optional[ErrorReporter] = None,
    logger: Optional[logging.Logger] = None,
) -> StreamStats:
    """
    Filter every line of `source` into `sink`, one record per output line.

    on_error:
    - "abort": report the failing line, then re-raise its error
    - "skip": report the failing line and continue with the next one
    """
    if on_error not in ON_ERROR_POLICIES:
        raise ValueError(f"on_error must be one of {ON_ERROR_POLICIES}, got {on_error!r}")
    log = logger or logging.getLogger("dropkeys")
    stats = StreamStats()

    for raw in source:
        stats.lines_read += 1
        line = _strip_eol(raw)
        if skip_blank_lines and not line.strip():
            stats.blank_lines += 1
            continue
        try:
            process_line(index, line, sink)
        except DropKeysError as e:
            stats.records_failed += 1
            e.context.setdefault("line_no", stats.lines_read)
            e.context.update({k: v for k, v in line_fingerprint(line).items() if k not in e.context})
            if reporter is not None:
                reporter.write_error(e, line_no=stats.lines_read, internal_exc=e)
            if on_error == "abort":
                # logged once, by the caller
                raise
            log.warning("line %d skipped: %s", stats.lines_read, e.user_message)
            continue
        sink.write(b"\n")
        stats.records_written += 1

    sink.flush()
    log.info(
        "done: %d line(s) read, %d written, %d failed, %d blank",
        stats.lines_read,
        stats.records_written,
        stats.records_failed,
        stats.blank_lines,
    )
    return stats
