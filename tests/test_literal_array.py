from __future__ import annotations

import pytest

from dropkeys.core.errors import KeyListSyntaxError
from dropkeys.core.literal_array import parse_single_quoted_array


@pytest.mark.parametrize(
    "text,want",
    [
        ("[]", []),
        ("[ ]", []),
        ("['foo']", ["foo"]),
        ("['foo', 'bar']", ["foo", "bar"]),
        (r"['some other \'string']", ["some other 'string"]),
        (r"['some string', 'some other \'string']", ["some string", "some other 'string"]),
        ("[ 'a' , 'b' ]", ["a", "b"]),
        ("  ['a','b']\n", ["a", "b"]),
        ("['props.secret', 'a.b.c']", ["props.secret", "a.b.c"]),
        ("['']", [""]),
        ("['a,b', '[x]']", ["a,b", "[x]"]),
        (r"['back\slash']", [r"back\slash"]),
        ('[\'say "hi"\']', ['say "hi"']),
    ],
)
def test_parse_single_quoted_array(text, want):
    assert parse_single_quoted_array(text) == want


@pytest.mark.parametrize(
    "text",
    [
        "foo",
        "",
        "['foo",
        "[foo]",
        "['foo'",
        "['a' 'b']",
        "['a',]",
        "[,'a']",
        "['a'] trailing",
        "'a'",
        '["a"]',
        r"['unterminated\']",
        "['a']]",
        "[",
    ],
)
def test_parse_single_quoted_array_rejects(text):
    with pytest.raises(KeyListSyntaxError) as ei:
        parse_single_quoted_array(text)
    assert ei.value.code == "key_list_syntax_error"
    assert "position" in ei.value.context


def test_error_reports_position_of_problem():
    with pytest.raises(KeyListSyntaxError) as ei:
        parse_single_quoted_array("['a', b]")
    assert ei.value.context["position"] == 6
