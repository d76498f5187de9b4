from __future__ import annotations

import io
import json

import pytest

from dropkeys.cli import EXIT_CONFIG_ERROR, EXIT_IO_ERROR, EXIT_OK, EXIT_RECORD_ERROR, build_parser, main, resolve_config
from tests.helpers.log_assertions import read_jsonl
from tests.helpers.streams import jsonl_source, output_lines


def _run(argv, stdin=b""):
    out = io.BytesIO()
    err = io.StringIO()
    src = stdin if isinstance(stdin, io.BytesIO) else io.BytesIO(stdin)
    code = main(argv, stdin=src, stdout=out, stderr=err)
    return code, out, err


def test_keys_flag_filters_stdin():
    code, out, _ = _run(["--keys", "['props.secret', 'id']"], jsonl_source('{"id":1,"props":{"secret":"x","public":"y"}}'))
    assert code == EXIT_OK
    assert output_lines(out) == ['{"props":{"public":"y"}}']


def test_key_flags_merge_with_keys_literal():
    args = build_parser().parse_args(["--keys", "['a']", "--key", "b.c", "--key", "d"])
    cfg = resolve_config(args)
    assert cfg.keys == ["a", "b.c", "d"]


def test_no_keys_is_passthrough():
    code, out, _ = _run([], jsonl_source('{"b": 2, "a": 1}'))
    assert code == EXIT_OK
    assert output_lines(out) == ['{"b":2,"a":1}']


def test_bad_keys_literal_exits_with_config_error():
    code, out, err = _run(["--keys", "[foo]"], jsonl_source("{}"))
    assert code == EXIT_CONFIG_ERROR
    assert out.getvalue() == b""
    assert "Malformed key list" in err.getvalue()


def test_malformed_line_aborts_by_default():
    code, out, err = _run(["--keys", "['a']"], jsonl_source('{"a":1,"b":1}', '{"a":', '{"b":2}'))
    assert code == EXIT_RECORD_ERROR
    assert output_lines(out) == ['{"b":1}']
    assert "line 2" in err.getvalue()


def test_skip_mode_with_error_log(tmp_path):
    log = tmp_path / "errors.jsonl"
    code, out, _ = _run(
        ["--keys", "['a']", "--on-error", "skip", "--error-log", str(log)],
        jsonl_source('{"a":1,"b":1}', "garbage", '{"b":2}'),
    )
    assert code == EXIT_OK
    assert output_lines(out) == ['{"b":1}', '{"b":2}']
    entries = read_jsonl(str(log))
    assert [e["line_no"] for e in entries] == [2]


def test_input_and_output_files(tmp_path):
    src = tmp_path / "in.jsonl"
    dst = tmp_path / "out.jsonl"
    src.write_bytes(b'{"x":{"y":1,"z":2}}\n\n{"x":3}\n')
    code, out, _ = _run(["--key", "x.y", "--input", str(src), "--output", str(dst)])
    assert code == EXIT_OK
    assert out.getvalue() == b""
    assert dst.read_bytes() == b'{"x":{"z":2}}\n{"x":3}\n'


def test_missing_input_file(tmp_path):
    code, _, err = _run(["--input", str(tmp_path / "nope.jsonl")])
    assert code == EXIT_CONFIG_ERROR
    assert "nope.jsonl" in err.getvalue()


def test_config_file_and_print_config(tmp_path):
    cfg_path = tmp_path / "dropkeys.json"
    cfg_path.write_text(json.dumps({"keys": ["a.b"], "on_error": "skip"}), encoding="utf-8")
    code, out, _ = _run(["--config", str(cfg_path), "--key", "c", "--print-config"])
    assert code == EXIT_OK
    printed = json.loads(out.getvalue().decode("utf-8"))
    assert printed["keys"] == ["c"]
    assert printed["on_error"] == "skip"


def test_invalid_config_file(tmp_path):
    cfg_path = tmp_path / "dropkeys.json"
    cfg_path.write_text(json.dumps({"nope": True}), encoding="utf-8")
    code, _, err = _run(["--config", str(cfg_path)])
    assert code == EXIT_CONFIG_ERROR
    assert "Invalid configuration" in err.getvalue()


def test_keep_blank_lines_turns_blank_into_error():
    code, out, _ = _run(["--keep-blank-lines"], jsonl_source("{}", ""))
    assert code == EXIT_RECORD_ERROR
    assert output_lines(out) == ["{}"]


def test_log_dir_creates_log_file(tmp_path):
    log_dir = tmp_path / "logs"
    code, _, _ = _run(["--log-dir", str(log_dir), "--log-level", "INFO"], jsonl_source("{}"))
    assert code == EXIT_OK
    assert (log_dir / "dropkeys.log").exists()


def test_on_error_choices_enforced():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--on-error", "ignore"])


def test_abort_message_printed_once(capsys):
    code = main(["--keys", "['a']"], stdin=jsonl_source('{"a":'), stdout=io.BytesIO())
    assert code == EXIT_RECORD_ERROR
    err = capsys.readouterr().err
    assert err.count("Record is not valid JSON") == 1
    assert "line 1" in err


class _FailingSink(io.BytesIO):
    def __init__(self, exc: BaseException):
        super().__init__()
        self._exc = exc

    def write(self, data):
        raise self._exc


def test_broken_pipe_stops_quietly():
    err = io.StringIO()
    code = main([], stdin=jsonl_source("{}", "{}"), stdout=_FailingSink(BrokenPipeError()), stderr=err)
    assert code == EXIT_IO_ERROR
    assert err.getvalue() == ""


def test_write_failure_reported():
    err = io.StringIO()
    code = main([], stdin=jsonl_source("{}"), stdout=_FailingSink(OSError(28, "No space left on device")), stderr=err)
    assert code == EXIT_IO_ERROR
    assert "No space left on device" in err.getvalue()
