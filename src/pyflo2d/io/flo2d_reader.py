"""
Unified FLO-2D text line-reading utilities.

FLO-2D text files are whitespace-separated records, one per line, with
no header and no comments. Every ``io/`` text reader should import
helpers from this module rather than defining its own copy.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from pyflo2d.core.exceptions import FileFormatError, Flo2DFileNotFoundError, Flo2DIOError


def iter_records(filepath: Path | str) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line_number, fields)`` for every non-blank line of a file.

    Line numbers are 1-based and count blank lines. Lines are decoded as
    UTF-8 one at a time; an undecodable line raises
    :class:`FileFormatError` carrying its line number. The file handle is
    closed when the generator finishes or is closed early.
    """
    filepath = Path(filepath)
    try:
        f = open(filepath, "rb")
    except FileNotFoundError as exc:
        raise Flo2DFileNotFoundError(f"File not found: {filepath}", filepath=filepath) from exc
    except OSError as exc:
        raise Flo2DIOError(f"Cannot open {filepath}: {exc}") from exc

    with f:
        for line_number, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise FileFormatError(
                    f"{filepath.name} is not a text file: {exc.reason} at byte {exc.start}",
                    line_number=line_number,
                ) from exc
            fields = line.split()
            if not fields:
                continue
            yield line_number, fields


def expect_fields(
    fields: list[str],
    count: int | tuple[int, ...],
    context: str = "",
    line_number: int | None = None,
) -> None:
    """Raise :class:`FileFormatError` unless ``len(fields)`` is allowed."""
    allowed = (count,) if isinstance(count, int) else count
    if len(fields) in allowed:
        return
    expected = " or ".join(str(c) for c in allowed)
    where = f" in {context}" if context else ""
    raise FileFormatError(
        f"Expected {expected} fields{where}, got {len(fields)}: {' '.join(fields)!r}",
        line_number=line_number,
    )


def parse_int(value: str, context: str = "", line_number: int | None = None) -> int:
    """Convert one field to ``int``, raising :class:`FileFormatError` if it is not one."""
    try:
        return int(value)
    except (ValueError, TypeError) as exc:
        what = f" for {context}" if context else ""
        raise FileFormatError(
            f"Not an integer{what}: {value!r}", line_number=line_number
        ) from exc


def parse_float(value: str, context: str = "", line_number: int | None = None) -> float:
    """Convert one field to ``float``, raising :class:`FileFormatError` if it is not one."""
    try:
        return float(value)
    except (ValueError, TypeError) as exc:
        what = f" for {context}" if context else ""
        raise FileFormatError(
            f"Not a number{what}: {value!r}", line_number=line_number
        ) from exc
