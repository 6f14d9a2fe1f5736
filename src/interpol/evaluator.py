"""Evaluators - turn expression code into values against an environment."""

from __future__ import annotations

import builtins
import functools
import logging
from collections import ChainMap
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from jinja2 import StrictUndefined, Undefined
from jinja2.sandbox import SandboxedEnvironment

from interpol.exceptions import EvaluationError

log = logging.getLogger(__name__)


@runtime_checkable
class Evaluator(Protocol):
    """Evaluates a code string with free names resolved against `environment`."""

    def evaluate(self, code: str, environment: Mapping[str, Any]) -> Any:
        """Return the value of `code`; raise `EvaluationError` on failure."""


_EVALUATOR_REGISTRY: dict[str, Callable[[], Evaluator]] = {}


def register_evaluator(name: str) -> Callable[[type], type]:
    """Decorator to register an evaluator class under `name`"""

    def decorator(cls: type) -> type:
        if name in _EVALUATOR_REGISTRY:
            raise ValueError(f"Evaluator already registered: {name}")
        _EVALUATOR_REGISTRY[name] = cls
        return cls

    return decorator


def available_evaluators() -> list[str]:
    """Names accepted by `create_evaluator`"""
    return sorted(_EVALUATOR_REGISTRY)


def create_evaluator(evaluator: str | Evaluator | None = None) -> Evaluator:
    """Resolve an evaluator name (or instance) to an evaluator instance"""
    if evaluator is None:
        evaluator = "python"

    if isinstance(evaluator, str):
        factory = _EVALUATOR_REGISTRY.get(evaluator)
        if factory is None:
            known = ", ".join(available_evaluators())
            raise ValueError(f"Unknown evaluator: {evaluator} (known: {known})")
        log.debug("Creating %s evaluator", evaluator)
        return factory()

    if not isinstance(evaluator, Evaluator):
        raise TypeError(f"{evaluator!r} does not implement evaluate(code, environment)")
    return evaluator


def scope(*mappings: Mapping[str, Any]) -> ChainMap:
    """Build a nested environment; the first mapping is the innermost scope.

    A fresh dict is always placed in front so that assignments made while
    evaluating never write into the caller's mappings.
    """
    return ChainMap({}, *mappings)


@functools.lru_cache(maxsize=512)
def _compile(code: str):
    # Parenthesised so that code may span lines and use a bare `:=`
    return compile(f"({code}\n)", "<interpol>", "eval")


@register_evaluator("python")
class PythonEvaluator:
    """Evaluates Python expressions in a namespace built from the environment.

    The environment is layered over `globals` in a plain dict, so lambdas,
    generator expressions and comprehensions see its names too. Names bound
    with `:=` are written back to the environment, so later expressions
    rendered against the same environment can see them.
    """

    def __init__(self, globals: dict[str, Any] | None = None):
        self.globals = {"__builtins__": builtins} if globals is None else globals

    def evaluate(self, code: str, environment: Mapping[str, Any]) -> Any:
        if not code.strip():
            raise EvaluationError(code, SyntaxError("empty expression"))
        namespace = dict(self.globals)
        namespace.update(environment)
        before = dict(namespace)
        try:
            result = eval(_compile(code), namespace)
            for name, value in namespace.items():
                if name == "__builtins__":
                    continue
                if name not in before or before[name] is not value:
                    environment[name] = value
        except Exception as exc:
            raise EvaluationError(code, exc) from exc
        return result


@register_evaluator("jinja")
class JinjaEvaluator:
    """Evaluates Jinja2 expressions in a sandbox.

    Only the Jinja expression subset is available (filters, tests, attribute
    and item access, literals); undefined names are errors.
    """

    def __init__(self, env: SandboxedEnvironment | None = None):
        self.env = env or SandboxedEnvironment(undefined=StrictUndefined)

    def evaluate(self, code: str, environment: Mapping[str, Any]) -> Any:
        try:
            expr = self.env.compile_expression(code.strip(), undefined_to_none=False)
            result = expr(**environment)
            if isinstance(result, Undefined):
                # StrictUndefined raises UndefinedError here
                str(result)
        except Exception as exc:
            raise EvaluationError(code, exc) from exc
        return result
