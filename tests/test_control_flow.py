from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import LoxTypeError, run_program, run_runtime_case

SCENARIOS = [
    pytest.param("if (true) print 1; else print 2;", ["1"], None, id="if-true"),
    pytest.param("if (nil) print 1; else print 2;", ["2"], None, id="if-nil-else"),
    pytest.param("if (0) print 1;", ["1"], None, id="zero-truthy"),
    pytest.param('if ("") print "empty";', ["empty"], None, id="empty-string-truthy"),
    pytest.param("if (false) print 1;", [], None, id="if-no-else"),
    pytest.param(
        "if (true) if (false) print 1; else print 2;",
        ["2"],
        None,
        id="dangling-else",
    ),
    pytest.param(
        dedent(
            """\
            var i = 0;
            while (i < 3) {
                print i;
                i = i + 1;
            }
        """
        ),
        ["0", "1", "2"],
        None,
        id="while",
    ),
    pytest.param("while (false) print 1;", [], None, id="while-never"),
    pytest.param(
        "for (var i = 0; i < 3; i = i + 1) print i;",
        ["0", "1", "2"],
        None,
        id="for",
    ),
    pytest.param(
        dedent(
            """\
            var i = 10;
            for (i = 0; i < 2; i = i + 1) {}
            print i;
        """
        ),
        ["2"],
        None,
        id="for-expression-init",
    ),
    pytest.param(
        dedent(
            """\
            var i = "outer";
            for (var i = 0; i < 1; i = i + 1) {}
            print i;
        """
        ),
        ["outer"],
        None,
        id="for-var-scoped",
    ),
    pytest.param(
        dedent(
            """\
            var n = 0;
            for (; n < 2;) n = n + 1;
            print n;
        """
        ),
        ["2"],
        None,
        id="for-condition-only",
    ),
    pytest.param(
        dedent(
            """\
            var a = 0;
            var temp;
            for (var b = 1; a < 100; b = temp + b) {
                print a;
                temp = a;
                a = b;
            }
        """
        ),
        ["0", "1", "1", "2", "3", "5", "8", "13", "21", "34", "55", "89"],
        None,
        id="fibonacci",
    ),
    pytest.param("if (-nil) print 1;", None, LoxTypeError, id="condition-error"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_control_flow_scenarios(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_infinite_for_left_by_return() -> None:
    source = dedent(
        """\
        fun spin() {
            var n = 0;
            for (;;) {
                n = n + 1;
                if (n == 5) return n;
            }
        }
        print spin();
        """
    )
    assert run_program(source) == ["5"]


def test_return_skips_loop_increment() -> None:
    source = dedent(
        """\
        var steps = 0;
        fun run() {
            for (var i = 0; i < 10; steps = steps + 1) {
                if (i == 0) return "left";
            }
        }
        print run();
        print steps;
        """
    )
    assert run_program(source) == ["left", "0"]


def test_return_from_nested_blocks_in_branches() -> None:
    source = dedent(
        """\
        fun classify(n) {
            if (n < 0) {
                { return "negative"; }
            } else {
                while (true) {
                    if (n == 0) { return "zero"; }
                    return "positive";
                }
            }
        }
        print classify(-1);
        print classify(0);
        print classify(3);
        """
    )
    assert run_program(source) == ["negative", "zero", "positive"]


def test_closures_in_loop_capture_shared_variable() -> None:
    source = dedent(
        """\
        var first;
        for (var i = 0; i < 3; i = i + 1) {
            fun show() { print i; }
            if (first == nil) first = show;
        }
        first();
        """
    )
    # the desugared loop has one `i` for every iteration
    assert run_program(source) == ["3"]
