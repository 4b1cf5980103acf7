"""
Indentation-aware text assembly for generated source.

Builders are emitted line by line; the assembler tracks the current
indentation depth and block scopes so nested type, member and statement
blocks come out well formed.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional


class SourceBuilder:
    """Incremental assembler for indented, brace-delimited source text."""

    def __init__(self, indent: str = "  ", line_ending: str = "\n"):
        """
        Initialize an empty builder.

        Args:
            indent: Text used for one indentation level
            line_ending: Separator placed between emitted lines
        """
        self.indent_unit = indent
        self.line_ending = line_ending
        self._lines: List[str] = []
        self._current: Optional[str] = None
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def indent(self) -> "SourceBuilder":
        self._depth += 1
        return self

    def dedent(self) -> "SourceBuilder":
        if self._depth == 0:
            raise ValueError("Cannot dedent below column zero")
        self._depth -= 1
        return self

    def append(self, text: str) -> "SourceBuilder":
        """Append text to the current line, indenting it if the line is new."""
        if not text:
            return self
        if self._current is None:
            self._current = self.indent_unit * self._depth
        self._current += text
        return self

    def append_line(self, text: str = "") -> "SourceBuilder":
        """Append text and terminate the line. Blank lines carry no indentation."""
        if text:
            self.append(text)
        self._lines.append(self._current or "")
        self._current = None
        return self

    def append_lines(self, text: str) -> "SourceBuilder":
        """Append a multi-line block, re-indenting each line at the current depth."""
        for line in text.splitlines():
            self.append_line(line.rstrip())
        return self

    def open_scope(self, header: Optional[str] = None) -> "SourceBuilder":
        """Emit an optional header line followed by ``{`` and indent."""
        if header:
            self.append_line(header)
        self.append_line("{")
        return self.indent()

    def close_scope(self, suffix: str = "") -> "SourceBuilder":
        """Dedent and emit ``}`` (plus an optional suffix such as ``;``)."""
        self.dedent()
        return self.append_line("}" + suffix)

    @contextmanager
    def block(self, header: Optional[str] = None, suffix: str = "") -> Iterator["SourceBuilder"]:
        """Context manager wrapping :meth:`open_scope`/:meth:`close_scope`."""
        self.open_scope(header)
        yield self
        self.close_scope(suffix)

    @property
    def source(self) -> str:
        """The assembled text, terminated by a final line ending."""
        lines = list(self._lines)
        if self._current is not None:
            lines.append(self._current)
        if not lines:
            return ""
        return self.line_ending.join(lines) + self.line_ending

    def __str__(self) -> str:
        return self.source
