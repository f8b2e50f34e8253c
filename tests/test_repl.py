from __future__ import annotations

import pytest
from prompt_toolkit.document import Document

from lox_ref.evaluator import Interpreter
from lox_ref.lexer_rd import Lexer
from lox_ref.repl import _compute_indent, _handle_slash, _is_unfinished, _normalize, eval_entry, open_depth
from lox_ref.repl_highlight import GROUP_STYLE, LoxReplLexer, token_group
from lox_ref.utils import debug_py_trace_enabled


@pytest.mark.parametrize(
    "text, depth",
    [
        pytest.param("print 1;", 0, id="flat"),
        pytest.param("fun f() {", 1, id="open-brace"),
        pytest.param("if (a) { while (b) {", 2, id="nested"),
        pytest.param("f(1,", 1, id="open-call"),
        pytest.param("{ }", 0, id="closed"),
        pytest.param("}}", 0, id="never-negative"),
        pytest.param('print "{";', 0, id="brace-in-string"),
    ],
)
def test_open_depth(text: str, depth: int) -> None:
    assert open_depth(text) == depth


@pytest.mark.parametrize(
    "text, unfinished",
    [
        pytest.param("print 1;", False, id="complete"),
        pytest.param("{ var a = 1;", True, id="open-block"),
        pytest.param('print "multi', True, id="open-string"),
        pytest.param("/* still", True, id="open-comment"),
        pytest.param("print @;", False, id="other-scan-error"),
    ],
)
def test_is_unfinished(text: str, unfinished: bool) -> None:
    assert _is_unfinished(text) is unfinished


def test_compute_indent_follows_depth() -> None:
    assert _compute_indent("fun f() {\n  if (x) {") == " " * 8
    assert _compute_indent("print 1;") == ""


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("pr\u200bint 1;\r") == "print 1;"


def test_slash_reset_replaces_interpreter(capsys: pytest.CaptureFixture[str]) -> None:
    box = [Interpreter()]
    original = box[0]

    assert _handle_slash("/reset", box)
    assert box[0] is not original
    assert "reset" in capsys.readouterr().out


def test_slash_py_traceback_toggles(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("LOX_DEBUG_PY_TRACE", "0")
    box = [Interpreter()]

    assert _handle_slash("/py-traceback on", box)
    assert debug_py_trace_enabled()
    assert _handle_slash("/py-traceback", box)
    assert not debug_py_trace_enabled()
    assert capsys.readouterr().out.splitlines() == ["Python traceback: on", "Python traceback: off"]


def test_slash_unknown_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert _handle_slash("/nope", [Interpreter()])
    assert "Unknown command: /nope" in capsys.readouterr().err


def test_plain_input_is_not_a_command() -> None:
    assert not _handle_slash("print 1;", [Interpreter()])


@pytest.mark.parametrize(
    "source, idx, group",
    [
        pytest.param("fun add(a) {}", 0, "keyword", id="fun-keyword"),
        pytest.param("fun add(a) {}", 1, "function", id="declared-name"),
        pytest.param("add(1);", 0, "function", id="called-name"),
        pytest.param("var x = 1;", 1, "identifier", id="plain-name"),
        pytest.param("var x = 1;", 3, "number", id="number"),
        pytest.param('print "s";', 1, "string", id="string"),
        pytest.param("print nil;", 1, "constant", id="nil"),
        pytest.param("print true;", 1, "boolean", id="bool"),
        pytest.param("a == b;", 1, "operator", id="operator"),
        pytest.param("a == b;", 3, "punctuation", id="semicolon"),
    ],
)
def test_token_group(source: str, idx: int, group: str) -> None:
    tokens = Lexer(source).tokenize()
    assert token_group(tokens, idx) == group


def _line_fragments(text: str):
    lexer = LoxReplLexer()
    return lexer.lex_document(Document(text))(0)


def test_highlight_covers_whole_line() -> None:
    text = 'var greeting = "hi"; // say hi'
    fragments = _line_fragments(text)

    assert "".join(part for _, part in fragments) == text
    assert (GROUP_STYLE["keyword"], "var") in fragments
    assert (GROUP_STYLE["string"], '"hi"') in fragments
    assert (GROUP_STYLE["comment"], "// say hi") in fragments


def test_highlight_marks_rejected_tail() -> None:
    fragments = _line_fragments('print "open')

    assert fragments[-1] == (GROUP_STYLE["error"], ' "open')


def test_highlight_empty_line() -> None:
    assert _line_fragments("") == [("", "")]


@pytest.mark.parametrize(
    "entry, expected",
    [
        pytest.param("1 + 2", ["3"], id="echo"),
        pytest.param("print 4;", ["4"], id="statement"),
        pytest.param("var = 1;", ["[line 1] Error at '=': Expect variable name."], id="syntax-error"),
        pytest.param("print -nil;", ["Operand of '-' must be a number.", "[line 1]"], id="runtime-error"),
    ],
)
def test_eval_entry_reports_on_stdout(capsys: pytest.CaptureFixture[str], entry: str, expected: list) -> None:
    eval_entry(entry, Interpreter())

    captured = capsys.readouterr()
    assert captured.out.splitlines() == expected
    assert captured.err == ""
