from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    LoxNameError,
    run_capture,
    run_program,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            var a = "global";
            {
                var a = "block";
                print a;
            }
            print a;
        """
        ),
        ["block", "global"],
        None,
        id="block-shadows",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            { a = 2; }
            print a;
        """
        ),
        ["2"],
        None,
        id="assign-reaches-outer",
    ),
    pytest.param(
        dedent(
            """\
            var a = "outer";
            {
                var a = a + " shadow";
                print a;
            }
        """
        ),
        ["outer shadow"],
        None,
        id="initializer-sees-outer",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            var a = 2;
            print a;
        """
        ),
        ["2"],
        None,
        id="global-redeclare",
    ),
    pytest.param(
        dedent(
            """\
            {
                var a = 1;
                var a = 2;
                print a;
            }
        """
        ),
        ["2"],
        None,
        id="local-redeclare",
    ),
    pytest.param("var a; print a;", ["nil"], None, id="uninitialized-nil"),
    pytest.param(
        dedent(
            """\
            var a = 1;
            {
                var b = 2;
                {
                    var c = 3;
                    print a + b + c;
                }
            }
        """
        ),
        ["6"],
        None,
        id="nested-blocks",
    ),
    pytest.param(
        dedent(
            """\
            var a = "global";
            {
                fun show() { print a; }
                show();
                var a = "block";
                show();
            }
        """
        ),
        ["global", "block"],
        None,
        id="closure-sees-later-define",
    ),
    pytest.param("print missing;", None, LoxNameError, id="undefined-read"),
    pytest.param("missing = 1;", None, LoxNameError, id="undefined-assign"),
    pytest.param("{ var inner = 1; } print inner;", None, LoxNameError, id="block-local-gone"),
    pytest.param("fun f() { var local = 1; } f(); print local;", None, LoxNameError, id="fn-local-gone"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_scoping_scenarios(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize(
    "source, name",
    [
        pytest.param("print nope;", "nope", id="read"),
        pytest.param("nope = 3;", "nope", id="assign"),
    ],
)
def test_undefined_variable_message(source: str, name: str) -> None:
    _, error = run_capture(source)

    assert isinstance(error, LoxNameError)
    assert error.message == f"Undefined variable '{name}'."
    assert error.token.lexeme == name


def test_assignment_does_not_create_variable() -> None:
    _, error = run_capture("{ fresh = 1; }\nprint fresh;")

    assert isinstance(error, LoxNameError)
    assert error.line == 1


def test_assignment_is_an_expression() -> None:
    assert run_program("var a; var b; a = b = 3; print a; print b;") == ["3", "3"]
    assert run_program("var a = 1; print a = 2;") == ["2"]


def test_closures_share_captured_variable() -> None:
    source = dedent(
        """\
        var get;
        var set;
        fun pair() {
            var value = "first";
            fun g() { return value; }
            fun s(v) { value = v; }
            get = g;
            set = s;
        }
        pair();
        print get();
        set("second");
        print get();
        """
    )
    assert run_program(source) == ["first", "second"]


def test_scope_restored_after_runtime_error(interpreter) -> None:
    with pytest.raises(LoxNameError):
        run_program('var a = "global"; { var a = "inner"; print undefined; }', interpreter)

    assert run_program("print a;", interpreter) == ["global"]


def test_scope_restored_after_return(interpreter) -> None:
    source = dedent(
        """\
        var a = "global";
        fun f() { var a = "local"; { return a; } }
        print f();
        print a;
        """
    )
    assert run_program(source, interpreter) == ["local", "global"]


def test_globals_persist_between_runs(interpreter) -> None:
    run_program("var counter = 1;", interpreter)
    run_program("counter = counter + 1;", interpreter)

    assert run_program("print counter;", interpreter) == ["2"]


def test_separate_interpreters_do_not_share_globals(interpreter) -> None:
    run_program("var only_here = 1;", interpreter)

    with pytest.raises(LoxNameError):
        run_program("print only_here;")
