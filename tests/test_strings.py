from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import LoxTypeError, run_program, run_runtime_case, syntax_messages

SCENARIOS = [
    pytest.param('print "hello";', ["hello"], None, id="plain"),
    pytest.param('print "";', [""], None, id="empty"),
    pytest.param('print "a" + "b" + "c";', ["abc"], None, id="concat-chain"),
    pytest.param('var s = "x"; s = s + s; print s;', ["xx"], None, id="concat-assign"),
    pytest.param('print "tab\\there";', ["tab\\there"], None, id="no-escapes"),
    pytest.param('print "say \'hi\'";', ["say 'hi'"], None, id="single-quotes-inside"),
    pytest.param('print "// not a comment";', ["// not a comment"], None, id="slashes-inside"),
    pytest.param('print "1" + 2;', None, LoxTypeError, id="no-coercion"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_string_scenarios(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_multiline_string_prints_verbatim() -> None:
    source = 'print "first\nsecond";\nprint "after";'
    assert run_program(source) == ["first", "second", "after"]


def test_multiline_string_advances_line_numbers() -> None:
    source = dedent(
        """\
        var s = "one
        two";
        print s +;
        """
    )
    assert syntax_messages(source) == ["[line 3] Error at ';': Expect expression."]


def test_unterminated_string_reported() -> None:
    messages = syntax_messages('print "open;')

    assert messages[0] == "[line 1] Error: Unterminated string."
    # the parser then runs out of tokens
    assert messages[1:] == ["[line 1] Error at end: Expect expression."]


def test_string_equality_by_value() -> None:
    source = 'var a = "ab"; var b = "a" + "b"; print a == b;'
    assert run_program(source) == ["true"]


def test_strings_are_not_numbers() -> None:
    assert run_program('print "3" == 3;') == ["false"]
