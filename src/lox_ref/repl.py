"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .evaluator import Interpreter
from .lexer_rd import Lexer
from .repl_highlight import LoxReplLexer
from .runner import repl_eval
from .token_types import TT
from .types import LoxRuntimeError, LoxSyntaxErrors
from .utils import debug_py_trace_enabled, stringify

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_OPENERS = {TT.LEFT_PAREN, TT.LEFT_BRACE}
_CLOSERS = {TT.RIGHT_PAREN, TT.RIGHT_BRACE}


def open_depth(text: str) -> int:
    """Count parentheses and braces still open at the end of *text*."""
    depth = 0

    for tok in Lexer(text).tokenize():
        if tok.type in _OPENERS:
            depth += 1
        elif tok.type in _CLOSERS:
            depth = max(depth - 1, 0)

    return depth


def _is_unfinished(text: str) -> bool:
    """True while a block or call is open, or a string/comment is unterminated."""
    lexer = Lexer(text)
    lexer.tokenize()

    for err in lexer.errors:
        if err.message.startswith("Unterminated"):
            return True

    return open_depth(text) > 0


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _handle_slash(line: str, interp_box: list[Interpreter]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ["LOX_DEBUG_PY_TRACE"] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop("LOX_DEBUG_PY_TRACE", None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop("LOX_DEBUG_PY_TRACE", None)
            else:
                os.environ["LOX_DEBUG_PY_TRACE"] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        interp_box[0] = Interpreter()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _compute_indent(text: str) -> str:
    """Indent the next continuation line four spaces per open brace."""
    return "    " * open_depth(text)


def eval_entry(text: str, interp: Interpreter) -> None:
    """Evaluate one entry; echoes and error reports share stdout with `print`."""
    try:
        result, stmt = repl_eval(text, interp)
    except LoxSyntaxErrors as exc:
        for err in exc.errors:
            print(err)
        return
    except LoxRuntimeError as exc:
        print(exc)
        if debug_py_trace_enabled():
            print("\nPython traceback:", file=sys.stderr)
            print(
                "".join(traceback.format_tb(exc.__traceback__)),
                file=sys.stderr,
                end="",
            )
        return

    if not stmt:
        print(stringify(result))


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset can swap the interpreter.
    interp_box: list[Interpreter] = [Interpreter()]

    history = InMemoryHistory()
    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.startswith("/") or not _is_unfinished(text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n" + _compute_indent(text))

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=LoxReplLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("lox repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt("> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        # Slash command?
        if _handle_slash(text, interp_box):
            continue

        eval_entry(text, interp_box[0])
