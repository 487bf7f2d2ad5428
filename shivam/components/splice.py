"""Line-based text splicing for generated source files.

These helpers do not parse JavaScript. They look for marker substrings and
insert whole lines next to them, which is enough for files that still look
the way the generator wrote them.
"""

from __future__ import annotations

_IMPORT_END_MARKERS = (" from '", ' from "', ";")


def _ensure_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def _last_import_end(lines: list[str]) -> int | None:
    """Index of the line that closes the last top-level import, if any."""
    start = None
    for index, line in enumerate(lines):
        if line.startswith("import ") or line.startswith("import{"):
            start = index
    if start is None:
        return None
    # Multi-line ``import {\n  a,\n} from 'x';`` ends at its ``from`` line.
    for index in range(start, len(lines)):
        if any(marker in lines[index] for marker in _IMPORT_END_MARKERS):
            return index
    return start


def insert_import(content: str, line: str) -> str:
    """Insert *line* after the last import, or at the top when there is none.

    Content already holding *line* is returned unchanged.
    """
    if line in content:
        return content
    lines = content.splitlines(keepends=True)
    end = _last_import_end(lines)
    if end is None:
        return _ensure_newline(line) + content
    lines[end] = _ensure_newline(lines[end])
    lines.insert(end + 1, _ensure_newline(line))
    return "".join(lines)


def insert_after_last(content: str, marker: str, line: str) -> str:
    """Insert *line* after the last line containing *marker*.

    Without a match *line* is appended at the end of the content.
    """
    lines = content.splitlines(keepends=True)
    for index in range(len(lines) - 1, -1, -1):
        if marker in lines[index]:
            lines[index] = _ensure_newline(lines[index])
            lines.insert(index + 1, _ensure_newline(line))
            return "".join(lines)
    if content and not content.endswith("\n"):
        content += "\n"
    return content + _ensure_newline(line)


def insert_before(content: str, marker: str, line: str) -> str:
    """Insert *line* before the first line containing *marker*.

    Without a match the content is returned unchanged.
    """
    lines = content.splitlines(keepends=True)
    for index, existing in enumerate(lines):
        if marker in existing:
            lines.insert(index, _ensure_newline(line))
            return "".join(lines)
    return content


def indent_of(content: str, marker: str) -> str:
    """Leading whitespace of the first line containing *marker*."""
    for existing in content.splitlines():
        if marker in existing:
            return existing[: len(existing) - len(existing.lstrip())]
    return ""
