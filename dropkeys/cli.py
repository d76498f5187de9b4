from __future__ import annotations

import argparse
import contextlib
import json
import os
import sys
from typing import Any, BinaryIO, Dict, List, Optional, TextIO

from dropkeys.core.config import DropKeysConfig, load_config
from dropkeys.core.error_reporter import ErrorReporter, ErrorReporterConfig
from dropkeys.core.errors import ConfigError, DropKeysError, KeyListSyntaxError
from dropkeys.core.keypaths import build_key_index, describe_key_index
from dropkeys.core.literal_array import parse_single_quoted_array
from dropkeys.core.logger import setup_logging
from dropkeys.core.stream import run_stream

EXIT_OK = 0
EXIT_RECORD_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_IO_ERROR = 3


def _silence_stdout() -> None:
    # keep the interpreter's final flush from raising on the closed pipe
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="dropkeys", description="Drop keys (dotted paths allowed) from newline-delimited JSON records.")
    ap.add_argument("--keys", default=None, help="Keys to drop as a single-quoted array, e.g. \"['props.secret', 'id']\".")
    ap.add_argument("--key", action="append", default=None, metavar="PATH", help="Key path to drop (repeatable).")
    ap.add_argument("--config", default=None, help="JSON config file.")
    ap.add_argument("--input", default=None, help="Read records from this file instead of stdin.")
    ap.add_argument("--output", default=None, help="Write records to this file instead of stdout.")
    ap.add_argument("--on-error", choices=["abort", "skip"], default=None, help="Stop at the first bad line (default) or skip it.")
    ap.add_argument("--keep-blank-lines", action="store_true", help="Treat blank lines as records (they fail to decode).")
    ap.add_argument("--log-dir", default=None, help="Also write a rotating log file here.")
    ap.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")
    ap.add_argument("--error-log", default=None, help="Append rejected-line reports (JSONL) to this file.")
    ap.add_argument("--print-config", action="store_true", help="Print the effective config and exit.")
    return ap


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    keys: Optional[List[str]] = None
    if args.keys is not None:
        keys = parse_single_quoted_array(args.keys)
    if args.key:
        keys = (keys or []) + list(args.key)
    return {
        "keys": keys,
        "on_error": args.on_error,
        "skip_blank_lines": False if args.keep_blank_lines else None,
        "log_dir": args.log_dir,
        "log_level": args.log_level,
        "error_log_path": args.error_log,
    }


def resolve_config(args: argparse.Namespace) -> DropKeysConfig:
    return load_config(args.config, overrides=_cli_overrides(args))


def main(argv: Optional[List[str]] = None, *, stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None, stderr: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    err_out = stderr or sys.stderr

    try:
        cfg = resolve_config(args)
    except (ConfigError, KeyListSyntaxError) as e:
        print(f"dropkeys: {e.user_message}", file=err_out)
        return EXIT_CONFIG_ERROR

    if args.print_config:
        out_text = json.dumps(cfg.model_dump(), indent=2, sort_keys=True) + "\n"
        (stdout or sys.stdout.buffer).write(out_text.encode("utf-8"))
        return EXIT_OK

    logger = setup_logging(cfg.log_dir, cfg.log_level)
    index = build_key_index(cfg.keys)
    logger.info("dropping %d key path(s): %s", len(cfg.keys), ", ".join(describe_key_index(index)) or "-")

    reporter = None
    if cfg.error_log_path:
        reporter = ErrorReporter(path=cfg.error_log_path, cfg=ErrorReporterConfig(include_tracebacks=cfg.include_tracebacks))

    with contextlib.ExitStack() as stack:
        try:
            source = stack.enter_context(open(args.input, "rb")) if args.input else (stdin or sys.stdin.buffer)
            sink = stack.enter_context(open(args.output, "wb")) if args.output else (stdout or sys.stdout.buffer)
        except OSError as e:
            print(f"dropkeys: {e}", file=err_out)
            return EXIT_CONFIG_ERROR
        try:
            run_stream(
                index,
                source,
                sink,
                on_error=cfg.on_error,
                skip_blank_lines=cfg.skip_blank_lines,
                reporter=reporter,
                logger=logger,
            )
        except DropKeysError as e:
            print(f"dropkeys: line {e.context.get('line_no', '?')}: {e.user_message}", file=err_out)
            return EXIT_RECORD_ERROR
        except BrokenPipeError:
            # reader went away (e.g. `| head -1`); stop quietly
            if sink is sys.stdout.buffer:
                _silence_stdout()
            return EXIT_IO_ERROR
        except OSError as e:
            print(f"dropkeys: {e}", file=err_out)
            return EXIT_IO_ERROR
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
