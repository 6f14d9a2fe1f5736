"""Block scanner - splits a template into literal and expression segments.

Doubling a marker escapes it: with the default markers `{{` renders a literal
`{` and `}}` a literal `}`, both in literal text and inside expression code.
"""

from __future__ import annotations

from typing import Iterator, Union

import msgspec

from interpol.exceptions import NestingError, UnmatchedDelimiterError

DEFAULT_OPEN = "{"
DEFAULT_CLOSE = "}"

# Quote characters whose contents are opaque to the nesting scanner
QUOTES = ("'", '"', "`")


class Literal(msgspec.Struct, frozen=True, tag=True):
    """Literal text between expression blocks (escapes already resolved)."""

    text: str
    raw: str
    span: tuple[int, int]


class Expression(msgspec.Struct, frozen=True, tag=True):
    """Code found between an open and a close marker."""

    code: str
    raw: str
    span: tuple[int, int]


Segment = Union[Literal, Expression]


class Scanner:
    """Scans templates for delimited expression blocks.

    The baseline scanner is non-nesting: inside a block the first single close
    marker ends it, and a single open marker is a `NestingError`. With
    `nested=True` markers are counted by depth instead and quoted strings in
    the code are skipped.
    """

    def __init__(
        self,
        open: str = DEFAULT_OPEN,
        close: str = DEFAULT_CLOSE,
        nested: bool = False,
    ):
        if not open or not close:
            raise ValueError("Delimiters must be non-empty strings")
        if nested and open == close:
            raise ValueError("Nested scanning needs distinct open and close markers")
        self.open = open
        self.close = close
        self.nested = nested

    def scan(self, template: str) -> Iterator[Segment]:
        """Yield segments of `template` in document order.

        A doubled close marker inside a block is always an escaped close
        character in the code, so a literal close marker can't directly
        follow a block: `{{{x}}}` scans to a block with the code `x}`.

        Raises:
            UnmatchedDelimiterError: A block is never closed, or a single close
                marker appears in literal text.
            NestingError: A single open marker appears inside a block while
                scanning without nesting.
        """
        open_, close = self.open, self.close
        n = len(template)
        i = 0
        start = 0
        buf: list[str] = []

        while i < n:
            if template.startswith(open_, i):
                if template.startswith(open_, i + len(open_)):
                    buf.append(open_)
                    i += 2 * len(open_)
                    continue

                if buf:
                    yield Literal("".join(buf), template[start:i], (start, i))
                    buf = []

                if self.nested:
                    end, code = self._scan_nested(template, i)
                else:
                    end, code = self._scan_flat(template, i)
                yield Expression(code, template[i:end], (i, end))
                i = start = end
                continue

            if template.startswith(close, i):
                if template.startswith(close, i + len(close)):
                    buf.append(close)
                    i += 2 * len(close)
                    continue
                raise UnmatchedDelimiterError(i, close)

            buf.append(template[i])
            i += 1

        if buf:
            yield Literal("".join(buf), template[start:n], (start, n))

    def _scan_flat(self, template: str, begin: int) -> tuple[int, str]:
        """Scan one block without nesting; returns (end, code)."""
        open_, close = self.open, self.close
        n = len(template)
        i = begin + len(open_)
        buf: list[str] = []

        while i < n:
            # Close is checked first so that open == close markers still work
            if template.startswith(close, i):
                if template.startswith(close, i + len(close)):
                    buf.append(close)
                    i += 2 * len(close)
                    continue
                return i + len(close), "".join(buf)

            if template.startswith(open_, i):
                if template.startswith(open_, i + len(open_)):
                    buf.append(open_)
                    i += 2 * len(open_)
                    continue
                raise NestingError(i, open_)

            buf.append(template[i])
            i += 1

        raise UnmatchedDelimiterError(begin, open_)

    def _scan_nested(self, template: str, begin: int) -> tuple[int, str]:
        """Scan one block counting nested markers; code is kept verbatim."""
        open_, close = self.open, self.close
        n = len(template)
        i = begin + len(open_)
        depth = 1
        quote: str | None = None

        while i < n:
            ch = template[i]

            if quote is not None:
                if ch == "\\":
                    i += 2
                    continue
                if ch == quote:
                    quote = None
                i += 1
                continue

            if ch in QUOTES:
                quote = ch
                i += 1
                continue

            if template.startswith(close, i):
                depth -= 1
                if depth == 0:
                    return i + len(close), template[begin + len(open_) : i]
                i += len(close)
                continue

            if template.startswith(open_, i):
                depth += 1
                i += len(open_)
                continue

            i += 1

        raise UnmatchedDelimiterError(begin, open_)


def scan(
    template: str,
    open: str = DEFAULT_OPEN,
    close: str = DEFAULT_CLOSE,
    *,
    nested: bool = False,
) -> Iterator[Segment]:
    """Scan `template` with a fresh `Scanner`."""
    return Scanner(open, close, nested).scan(template)
