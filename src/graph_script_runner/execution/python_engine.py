"""
RestrictedPython script engine.

Scripts are plain Python compiled with RestrictedPython and run against the
request bindings. The value of a trailing expression is the script result;
without one, whatever the script assigned to `result` is returned.

Allowed: safe builtins plus list, dict, set, min, max, sum, enumerate, any,
all and the json/math modules. Blocked: imports, open, exec, eval, compile,
and attribute access to underscore names.
"""

from __future__ import annotations

import ast
import json
import logging
import math
import operator
import threading
from typing import Any, Mapping

from RestrictedPython import compile_restricted
from RestrictedPython.Eval import default_guarded_getitem, default_guarded_getiter
from RestrictedPython.Guards import (
    full_write_guard,
    guarded_iter_unpack_sequence,
    guarded_unpack_sequence,
    safe_builtins,
    safer_getattr,
)
from RestrictedPython.PrintCollector import PrintCollector

from ..errors import ScriptEvaluationError
from .registry import register_engine
from .types import EvaluationOutcome

logger = logging.getLogger(__name__)

ENGINE_NAME = "python"
RESULT_VARIABLE = "result"
SCRIPT_FILENAME = "<script>"

_EXTRA_BUILTINS = (
    "all",
    "any",
    "dict",
    "enumerate",
    "filter",
    "frozenset",
    "list",
    "map",
    "max",
    "min",
    "reversed",
    "set",
    "sum",
)

_INPLACE_OPERATORS = {
    "+=": operator.iadd,
    "-=": operator.isub,
    "*=": operator.imul,
    "/=": operator.itruediv,
    "//=": operator.ifloordiv,
    "%=": operator.imod,
    "**=": operator.ipow,
    "<<=": operator.ilshift,
    ">>=": operator.irshift,
    "&=": operator.iand,
    "|=": operator.ior,
    "^=": operator.ixor,
}


def _inplacevar(op: str, target: Any, value: Any) -> Any:
    """Apply an augmented assignment operator for restricted code.

    Example:
        ```python
        assert _inplacevar("+=", 1, 2) == 3
        ```
    """
    try:
        fn = _INPLACE_OPERATORS[op]
    except KeyError:
        raise SyntaxError(f"Augmented assignment '{op}' is not allowed") from None
    return fn(target, value)


def _make_builtins() -> dict[str, Any]:
    """RestrictedPython safe builtins extended with common container helpers.

    Example:
        ```python
        builtins = _make_builtins()
        ```
    """
    import builtins

    safe = dict(safe_builtins)
    for name in _EXTRA_BUILTINS:
        safe.setdefault(name, getattr(builtins, name))
    return safe


def _make_guard_globals() -> dict[str, Any]:
    """Guards required by RestrictedPython's rewritten bytecode.

    Example:
        ```python
        guards = _make_guard_globals()
        ```
    """
    return {
        "_getattr_": safer_getattr,
        "_getiter_": default_guarded_getiter,
        "_getitem_": default_guarded_getitem,
        "_iter_unpack_sequence_": guarded_iter_unpack_sequence,
        "_unpack_sequence_": guarded_unpack_sequence,
        "_write_": full_write_guard,
        "_inplacevar_": _inplacevar,
        "_print_": PrintCollector,
    }


def _describe(exc: BaseException) -> str:
    """Human-readable message for a failed evaluation.

    RestrictedPython reports policy violations as a tuple of messages.

    Example:
        ```python
        msg = _describe(ZeroDivisionError("division by zero"))
        ```
    """
    if isinstance(exc, SyntaxError) and exc.args and isinstance(exc.args[0], (tuple, list)):
        return "SyntaxError: " + "; ".join(str(item) for item in exc.args[0])
    return f"{type(exc).__name__}: {exc}"


def compile_script(script: str, filename: str = SCRIPT_FILENAME) -> Any:
    """Compile a script, capturing a trailing expression into `result`.

    Raises SyntaxError for invalid or disallowed code.

    Example:
        ```python
        code = compile_script("x = 2\\nx * 21")
        ```
    """
    tree = ast.parse(script, filename, "exec")
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        last = tree.body[-1]
        capture = ast.Assign(
            targets=[ast.Name(id=RESULT_VARIABLE, ctx=ast.Store())],
            value=last.value,
        )
        tree.body[-1] = ast.copy_location(capture, last)
        ast.fix_missing_locations(tree)
    return compile_restricted(tree, filename, "exec")


class PythonScriptEngine:
    """Evaluate scripts with RestrictedPython.

    Compiled scripts are cached by source text for the lifetime of the engine.

    Example:
        ```python
        engine = PythonScriptEngine()
        outcome = engine.evaluate("1 + 1", {})
        ```
    """

    def __init__(self) -> None:
        """Prepare builtins and an empty compile cache.

        Example:
            ```python
            engine = PythonScriptEngine()
            ```
        """
        self._builtins = _make_builtins()
        self._guards = _make_guard_globals()
        self._modules = {"json": json, "math": math}
        self._cache_lock = threading.Lock()
        self._compiled: dict[str, Any] = {}

    @property
    def cached_scripts(self) -> int:
        """Number of distinct scripts compiled by this engine.

        Example:
            ```python
            assert PythonScriptEngine().cached_scripts == 0
            ```
        """
        with self._cache_lock:
            return len(self._compiled)

    def eval(self, script: str, bindings: Mapping[str, Any]) -> Any:
        """Evaluate a script and return its raw value.

        Raises ScriptEvaluationError when the script fails to compile or run.

        Example:
            ```python
            value = engine.eval("name.upper()", {"name": "ada"})
            ```
        """
        try:
            code = self._compile(script)
            scope = self._build_scope(bindings)
            exec(code, scope)  # noqa: S102 - restricted environment
        except Exception as exc:
            raise ScriptEvaluationError(_describe(exc)) from exc
        return scope.get(RESULT_VARIABLE)

    def evaluate(self, script: str, bindings: Mapping[str, Any]) -> EvaluationOutcome:
        """Evaluate a script and report success or failure as data.

        Example:
            ```python
            outcome = engine.evaluate("raise ValueError('boom')", {})
            assert outcome.error == "ValueError: boom"
            ```
        """
        try:
            value = self.eval(script, bindings)
        except ScriptEvaluationError as exc:
            logger.debug("Script evaluation failed: %s", exc)
            return EvaluationOutcome.failure(str(exc))
        return EvaluationOutcome.success(value)

    def _compile(self, script: str) -> Any:
        """Return cached bytecode for a script, compiling on first use.

        Example:
            ```python
            code = engine._compile("1 + 1")
            ```
        """
        with self._cache_lock:
            code = self._compiled.get(script)
        if code is None:
            code = compile_script(script)
            with self._cache_lock:
                self._compiled[script] = code
        return code

    def _build_scope(self, bindings: Mapping[str, Any]) -> dict[str, Any]:
        """Build fresh globals for one evaluation.

        Bindings may shadow the helper modules but never the guards. The
        `result` name is reserved: a binding under that name is dropped so it
        cannot surface as the output of a script that never sets it.

        Example:
            ```python
            scope = engine._build_scope({"g": adapter})
            ```
        """
        scope: dict[str, Any] = dict(self._modules)
        scope.update(bindings)
        scope.pop(RESULT_VARIABLE, None)
        scope.update(self._guards)
        scope["__builtins__"] = self._builtins
        scope["__name__"] = "script"
        return scope


register_engine(ENGINE_NAME, PythonScriptEngine, replace=True)
