"""Transform pipeline - renders scanned segments to text."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Literal as LiteralType

from interpol.coerce import DEFAULT_NA, to_tokens
from interpol.exceptions import RecycleError, TemplateError
from interpol.scanner import Expression, Literal, Segment
from interpol.transformers import Transformer, evaluate_transformer

log = logging.getLogger(__name__)

RecyclePolicy = LiteralType["cycle", "strict"]


def recycle(vectors: list[list[str]], policy: RecyclePolicy = "cycle") -> list[str]:
    """Combine token vectors positionally into lines.

    The result has the length of the longest vector. With `cycle` shorter
    vectors repeat from their start; with `strict` only length-1 vectors may
    repeat. Any empty vector gives no lines at all.
    """
    lengths = [len(vector) for vector in vectors]
    if 0 in lengths:
        return []
    n = max(lengths, default=1)

    if policy == "strict":
        if any(length not in (1, n) for length in lengths):
            raise RecycleError(lengths)
    elif policy != "cycle":
        raise ValueError(f"Unknown recycle policy: {policy}")

    return ["".join(vector[i % len(vector)] for vector in vectors) for i in range(n)]


class Renderer:
    """Renders segments by routing each expression through a transformer.

    Expressions are transformed one at a time in document order, so side
    effects on the environment are visible to later expressions.
    """

    def __init__(
        self,
        transformer: Transformer | None = None,
        separator: str = "",
        na: str = DEFAULT_NA,
        recycle: RecyclePolicy = "cycle",
    ):
        self.transformer = transformer or evaluate_transformer()
        self.separator = separator
        self.na = na
        self.recycle = recycle

    def render(self, segments: Iterable[Segment], environment: Mapping[str, Any]) -> str:
        """Render to one string; multi-valued results are joined by `separator`.

        Args:
            segments: Scanned segments. They are collected before any
                expression is transformed, so scan errors leave no side effects.
            environment: Scope used to resolve names in expression code.

        Returns:
            The rendered text.
        """
        segments = list(segments)
        log.debug("Rendering %d segments", len(segments))

        parts: list[str] = []
        for segment in segments:
            if isinstance(segment, Literal):
                parts.append(segment.text)
            else:
                parts.append(self.separator.join(self._tokens(segment, environment)))
        return "".join(parts)

    def render_lines(
        self, segments: Iterable[Segment], environment: Mapping[str, Any]
    ) -> list[str]:
        """Render to one line per element of the longest multi-valued result."""
        segments = list(segments)
        log.debug("Rendering %d segments as lines", len(segments))

        vectors: list[list[str]] = []
        for segment in segments:
            if isinstance(segment, Literal):
                vectors.append([segment.text])
            else:
                vectors.append(self._tokens(segment, environment))
        return recycle(vectors, self.recycle)

    def _tokens(self, segment: Expression, environment: Mapping[str, Any]) -> list[str]:
        try:
            value = self.transformer(segment.code, environment)
        except TemplateError as exc:
            if exc.span is None:
                exc.span = segment.span
            if exc.code is None:
                exc.code = segment.code
            raise
        except Exception as exc:
            start, end = segment.span
            exc.add_note(f"while rendering {segment.raw!r} at {start}:{end}")
            raise
        return to_tokens(value, self.na)


def render(
    segments: Iterable[Segment],
    environment: Mapping[str, Any],
    transformer: Transformer | None = None,
    *,
    separator: str = "",
    na: str = DEFAULT_NA,
) -> str:
    """Render `segments` with a one-off `Renderer`."""
    return Renderer(transformer, separator=separator, na=na).render(segments, environment)
