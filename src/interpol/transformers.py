"""Transformers - hooks between an expression's code and its rendered value.

A transformer is any callable `(code, environment) -> value`. The factories
here close over their configuration and return such a callable:

    evaluate_transformer()                    # plain evaluation (the default)
    collapse_transformer(sep=", ")            # "{items*}" -> "a, b, c"
    safely_transformer(Value("ERR"))          # failures render as "ERR"
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any, Union

import msgspec

from interpol.coerce import DEFAULT_NA, to_tokens
from interpol.evaluator import Evaluator, create_evaluator, scope
from interpol.exceptions import EvaluationError, TransformerError

log = logging.getLogger(__name__)

Transformer = Callable[[str, Mapping[str, Any]], Any]


class Value(msgspec.Struct, frozen=True, tag=True):
    """Fallback substituted as is."""

    value: Any = None


class Computation(msgspec.Struct, frozen=True, tag=True):
    """Fallback expression evaluated when the original code fails.

    `code` and `error` are bound while it is evaluated.
    """

    expr: str


Fallback = Union[Value, Computation]


def decode_fallback(data: str | bytes, format: str = "yaml") -> Fallback:
    """Decode a tagged fallback, e.g. `{type: Computation, expr: "..."}`."""
    if format == "yaml":
        return msgspec.yaml.decode(data, type=Fallback)
    if format == "json":
        return msgspec.json.decode(data, type=Fallback)
    raise ValueError(f"Unsupported fallback format: {format}")


def evaluate_transformer(evaluator: str | Evaluator | None = None) -> Transformer:
    """Transformer that evaluates the code unchanged."""
    return create_evaluator(evaluator).evaluate


def collapse_transformer(
    regex: str = r"[*]$",
    sep: str = ", ",
    last: str = "",
    na: str = DEFAULT_NA,
    evaluator: str | Evaluator | None = None,
) -> Transformer:
    """Collapse multi-valued results of code matching `regex` into one token.

    The matched text is removed before evaluation. When `last` is given it
    separates the final two items instead of `sep`.
    """
    pattern = re.compile(regex)
    ev = create_evaluator(evaluator)

    def transform(code: str, environment: Mapping[str, Any]) -> Any:
        match = pattern.search(code)
        if match is None:
            return ev.evaluate(code, environment)

        code = code[: match.start()] + code[match.end() :]
        tokens = to_tokens(ev.evaluate(code, environment), na)
        if last and len(tokens) > 1:
            return sep.join(tokens[:-1]) + last + tokens[-1]
        return sep.join(tokens)

    return transform


def safely_transformer(
    otherwise: Fallback | Any = Value(None),
    evaluator: str | Evaluator | None = None,
) -> Transformer:
    """Substitute a fallback instead of raising `EvaluationError`.

    A plain (non-`Fallback`) `otherwise` is treated as `Value(otherwise)`; it is
    never evaluated.
    """
    fallback = otherwise if isinstance(otherwise, (Value, Computation)) else Value(otherwise)
    ev = create_evaluator(evaluator)

    def transform(code: str, environment: Mapping[str, Any]) -> Any:
        try:
            return ev.evaluate(code, environment)
        except EvaluationError as exc:
            log.debug("Substituting fallback for %r: %s", code, exc.cause)
            if isinstance(fallback, Value):
                return fallback.value

            inner = scope({"code": code, "error": exc}, environment)
            try:
                return ev.evaluate(fallback.expr, inner)
            except EvaluationError as fallback_exc:
                raise TransformerError(
                    f"Fallback {fallback.expr!r} failed for {code!r}: {fallback_exc.cause}"
                ) from fallback_exc

    return transform
