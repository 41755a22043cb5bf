"""Line-addressable source ranges over a normalized PSL file.

A Source is a run of consecutive lines from the input, plus the absolute
index of its first line. Like a Python slice, it covers the half-open
interval [line_offset, line_offset + len(lines)).

The parser uses a Source as a cursor: the take_* methods remove a prefix
of the remaining lines and return it as a new Source.
"""

from dataclasses import dataclass
from typing import Callable

LinePredicate = Callable[[str], bool]


@dataclass
class Source:
    lines: tuple[str, ...] = ()
    line_offset: int = 0

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def num_lines(self) -> int:
        return len(self.lines)

    @property
    def end(self) -> int:
        """Absolute index one past the last line."""
        return self.line_offset + len(self.lines)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def location_string(self) -> str:
        """Short description of the location, e.g. "lines 4-7"."""
        # Editors count lines from 1 and show inclusive ranges.
        start = self.line_offset + 1
        end = self.line_offset + len(self.lines)

        if end < start:
            # Zero-line ranges only exist transiently during parsing.
            return f"<invalid Source, 0-line range before line {start}>"
        if start == end:
            return f"line {start}"
        return f"lines {start}-{end}"

    def empty(self) -> bool:
        return not self.lines

    def copy(self) -> "Source":
        return Source(self.lines, self.line_offset)

    def slice(self, start: int, end: int) -> "Source":
        """Return lines [start:end) of this range, relative to its first line."""
        if start < 0 or end < start or end > len(self.lines):
            raise IndexError(f"invalid slice [{start}:{end}] of {len(self.lines)} lines")
        return Source(self.lines[start:end], self.line_offset + start)

    def first(self) -> "Source":
        if not self.lines:
            raise IndexError("first() of empty Source")
        return self.slice(0, 1)

    def take_n(self, n: int) -> "Source":
        """Remove the first n lines and return them."""
        ret = self.slice(0, n)
        self.lines = self.lines[n:]
        self.line_offset += n
        return ret

    def take_one(self) -> "Source":
        return self.take_n(1)

    def take_while(self, pred: LinePredicate) -> "Source":
        """Remove the (possibly empty) run of leading lines matching pred."""
        for i, line in enumerate(self.lines):
            if not pred(line):
                return self.take_n(i)
        return self.take_n(len(self.lines))

    def take_while_not(self, pred: LinePredicate) -> "Source":
        return self.take_while(lambda line: not pred(line))

    def take_until(self, pred: LinePredicate) -> tuple["Source", bool]:
        """Remove lines up to and including the first line matching pred.

        Returns the removed lines and whether a matching line was found.
        If nothing matches, all remaining lines are removed.
        """
        for i, line in enumerate(self.lines):
            if pred(line):
                return self.take_n(i + 1), True
        return self.take_n(len(self.lines)), False

    def append(self, other: "Source") -> "Source":
        """Return a new Source covering self followed by other.

        The two ranges must be adjacent in the input.
        """
        if self.end != other.line_offset:
            raise ValueError(
                f"cannot append non-adjacent Sources "
                f"({self.location_string()} and {other.location_string()})"
            )
        return Source(tuple(self.lines) + tuple(other.lines), self.line_offset)
