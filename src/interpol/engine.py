"""Engine - scanner and renderer composed behind one configuration.

Usage:
    name = "world"
    interpolate("Hello {name}!")                      # caller's scope
    interpolate("{x + 1}", {"x": 5})                  # explicit environment
    interpolate_data({"x": 5}, "{x} and {name}")      # data over caller's scope
    interpolate_lines("item {range(3)}")              # one line per value
"""

from __future__ import annotations

import logging
import re
import sys
from collections import ChainMap
from collections.abc import Mapping, Sequence
from types import FrameType
from typing import Any

import msgspec

from interpol.config import RenderConfig
from interpol.evaluator import scope
from interpol.pipeline import Renderer
from interpol.scanner import Literal, Scanner, Segment
from interpol.transformers import evaluate_transformer

log = logging.getLogger(__name__)

_INDENT = re.compile(r"[ \t]*")


def trim_segments(segments: Sequence[Segment]) -> list[Segment]:
    """Trim the literal text of a scanned template line-wise.

    - Leading whitespace of the first line and trailing whitespace of the last
      line are removed; either line is dropped when blank.
    - The minimum indentation of the non-blank lines after the first is
      stripped from each of those lines.
    """
    texts = {i: s.text for i, s in enumerate(segments) if isinstance(s, Literal)}
    if not texts:
        return list(segments)

    last_index = len(segments) - 1
    starts: dict[int, list[int]] = {i: [] for i in texts}

    if 0 in texts:
        text = texts[0].lstrip(" \t")
        if text.startswith("\n"):
            text = text[1:]
            starts[0].append(0)
        texts[0] = text
    if last_index in texts:
        text = texts[last_index].rstrip(" \t")
        if text.endswith("\n"):
            text = text[:-1]
        texts[last_index] = text

    for i, text in texts.items():
        starts[i].extend(m.end() for m in re.finditer("\n", text))

    indent: int | None = None
    for i, text in texts.items():
        for pos in starts[i]:
            end = _INDENT.match(text, pos).end()
            if end < len(text) and text[end] == "\n":
                continue
            if end == len(text) and i == last_index:
                continue
            indent = end - pos if indent is None else min(indent, end - pos)

    if indent:
        for i, text in texts.items():
            # Right to left so earlier positions stay valid
            for pos in reversed(starts[i]):
                end = min(_INDENT.match(text, pos).end(), pos + indent)
                text = text[:pos] + text[end:]
            texts[i] = text

    trimmed: list[Segment] = []
    for i, segment in enumerate(segments):
        if i not in texts:
            trimmed.append(segment)
        elif texts[i]:
            trimmed.append(msgspec.structs.replace(segment, text=texts[i]))
    return trimmed


class Interpolator:
    """Renders templates according to a `RenderConfig`.

    Every call scans with a fresh cursor, so a transformer may itself render
    templates (with this or another interpolator) while a render is running.
    """

    def __init__(self, config: RenderConfig | None = None, **overrides: Any):
        config = config or RenderConfig()
        if overrides:
            config = config.merged(**overrides)
        self.config = config
        self.renderer = Renderer(
            config.transformer or evaluate_transformer(config.evaluator),
            separator=config.separator,
            na=config.na,
            recycle=config.recycle,
        )

    def segments(self, template: str) -> list[Segment]:
        """Scan (and optionally trim) `template`."""
        scanner = Scanner(self.config.open, self.config.close, self.config.nested)
        segments = list(scanner.scan(template))
        if self.config.trim:
            segments = trim_segments(segments)
        log.debug("Scanned %d segments (trim=%s)", len(segments), self.config.trim)
        return segments

    def render(self, template: str, environment: Mapping[str, Any]) -> str:
        return self.renderer.render(self.segments(template), environment)

    def render_lines(self, template: str, environment: Mapping[str, Any]) -> list[str]:
        return self.renderer.render_lines(self.segments(template), environment)


def _caller_scope(frame: FrameType) -> ChainMap:
    return ChainMap(frame.f_locals, frame.f_globals)


def interpolate(
    template: str,
    env: Mapping[str, Any] | None = None,
    /,
    *,
    config: RenderConfig | None = None,
    **bindings: Any,
) -> str:
    """Render `template`, resolving names in `bindings`, then `env`.

    When `env` is omitted the caller's locals and globals are used.

    Example:
        >>> interpolate("{x + 1}", {"x": 5})
        '6'
    """
    if env is None:
        env = _caller_scope(sys._getframe(1))
    return Interpolator(config).render(template, scope(bindings, env))


def interpolate_data(
    data: Mapping[str, Any],
    template: str,
    env: Mapping[str, Any] | None = None,
    /,
    *,
    config: RenderConfig | None = None,
    **bindings: Any,
) -> str:
    """Render `template` with `data` searched before `env` (or the caller's scope)."""
    if env is None:
        env = _caller_scope(sys._getframe(1))
    return Interpolator(config).render(template, scope(bindings, data, env))


def interpolate_lines(
    template: str,
    env: Mapping[str, Any] | None = None,
    /,
    *,
    config: RenderConfig | None = None,
    **bindings: Any,
) -> list[str]:
    """Render one line per value of the template's multi-valued expressions.

    Example:
        >>> interpolate_lines("{n}: {range(n)}", n=2)
        ['2: 0', '2: 1']
    """
    if env is None:
        env = _caller_scope(sys._getframe(1))
    return Interpolator(config).render_lines(template, scope(bindings, env))
