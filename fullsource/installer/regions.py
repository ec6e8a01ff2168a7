"""Line-indexed region locator for targeted edits of manifest text."""

from __future__ import annotations

from dataclasses import dataclass

from fullsource.errors import ParseError


@dataclass(frozen=True)
class Line:
    number: int
    start: int
    text: str

    @property
    def indent(self) -> str:
        return self.text[: len(self.text) - len(self.text.lstrip(" \t"))]

    @property
    def content(self) -> str:
        return self.text.strip()


@dataclass(frozen=True)
class Region:
    """An element located in the text.

    ``open_line`` is the line holding ``<tag>``, ``close_line`` the line
    holding ``</tag>``; ``close_offset`` is the offset of ``</tag>`` itself.
    """

    tag: str
    open_line: Line
    close_line: Line
    close_offset: int

    @property
    def indent(self) -> str:
        return self.open_line.indent


@dataclass(frozen=True)
class TextSpan:
    """Half-open ``[start, end)`` character span plus its replacement."""

    start: int
    end: int
    replacement: str

    def apply(self, text: str) -> str:
        return text[: self.start] + self.replacement + text[self.end :]


def index_lines(text: str) -> list[Line]:
    lines: list[Line] = []
    offset = 0
    for number, raw in enumerate(text.splitlines(keepends=True)):
        lines.append(Line(number=number, start=offset, text=raw))
        offset += len(raw)
    return lines


def locate_region(text: str, tag: str, indent: str) -> Region:
    """Find the ``<tag>`` element whose opening line is indented by *indent*.

    Nested elements of the same name (e.g. dependencies inside
    dependencyManagement or plugins) sit deeper and are skipped.
    Raises :class:`ParseError` when either marker is missing.
    """
    lines = index_lines(text)
    opener = f"<{tag}>"
    closer = f"</{tag}>"

    open_line: Line | None = None
    for line in lines:
        if line.indent == indent and line.content.startswith(opener):
            open_line = line
            break
    if open_line is None:
        raise ParseError(f"could not locate {opener} at the expected nesting depth")

    # single-line element, e.g. "    <properties></properties>"
    inline = open_line.text.find(closer)
    if inline != -1:
        return Region(tag, open_line, open_line, open_line.start + inline)

    for line in lines[open_line.number + 1 :]:
        if line.indent == indent and line.content.startswith(closer):
            return Region(tag, open_line, line, line.start + len(line.indent))
    raise ParseError(f"could not locate {closer} matching line {open_line.number + 1}")
