import bisect
import re
from typing import Generic, Iterator, TypeVar

from .exceptions import FieldCountError, InvalidCoordinatesError

__all__ = [
    "RegionRecord",
    "RegionIndex",
    "parse_region_record",
]

T = TypeVar("T")

# ASCII base-10 integer, optionally signed
RE_COORD = re.compile(r"^[+-]?[0-9]+$")

# contig, 0-based start, 0-based exclusive end, remaining (unparsed) text of the line
RegionRecord = tuple[str, int, int, str]


def _line_filter_fn(s: str) -> bool:
    """
    Filter function to skip blank lines and comments
    :param s: line of a file, stripped of surrounding whitespace
    :return: whether the line is not blank and is not a comment
    """
    return bool(s) and not s.startswith("#")


def parse_region_record(line: str, one_based: bool = True, line_no: int | None = None) -> RegionRecord | None:
    """
    Parse the leading CONTIG START END fields of a whitespace-delimited region record.
    :param line: Line of text. Fields may be separated by any run of whitespace.
    :param one_based: If True, coordinates are 1-based and closed, and are adjusted to 0-based half-open. Otherwise,
                      assume standard BED format - 0-based, half-open intervals.
    :param line_no: Line number, for error messages.
    :return: (contig, start, end, rest of the line), or None if the line is blank or a comment.
    """

    line = line.strip()
    if not _line_filter_fn(line):
        return None

    ls = line.split(maxsplit=3)
    if len(ls) < 3:
        raise FieldCountError("wrong number of fields", line, line_no)

    contig, ss, es = ls[:3]

    if RE_COORD.match(ss) is None or RE_COORD.match(es) is None:
        raise InvalidCoordinatesError("non-integer coordinates", line, line_no)

    start = int(ss)
    end = int(es)

    if one_based:
        if start < 1 or end < start:
            raise InvalidCoordinatesError(f"invalid 1-based interval {start}-{end}", line, line_no)
        start -= 1  # Convert from 1-based closed to 0-based half-open; end stays the same.
    elif start < 0 or end <= start:
        raise InvalidCoordinatesError(f"invalid 0-based interval [{start}, {end})", line, line_no)

    return contig, start, end, ls[3] if len(ls) > 3 else ""


class RegionIndex(Generic[T]):
    """
    Per-contig sorted interval lists with an attached payload for each interval. Overlap queries use bisection on
    interval starts. Overlapping intervals are returned in order of ascending start; intervals with the same start are
    returned in the order they were inserted.
    """

    def __init__(self):
        self._starts: dict[str, list[int]] = {}
        self._intervals: dict[str, list[tuple[int, int, T]]] = {}
        self._n_intervals: int = 0

    def __len__(self) -> int:
        return self._n_intervals

    @property
    def contigs(self) -> tuple[str, ...]:
        return tuple(self._intervals.keys())

    def insert(self, contig: str, start: int, end: int, payload: T) -> None:
        if contig not in self._intervals:
            self._starts[contig] = []
            self._intervals[contig] = []

        c_starts = self._starts[contig]
        i = bisect.bisect_right(c_starts, start)  # _right keeps insertion order for equal starts
        c_starts.insert(i, start)
        self._intervals[contig].insert(i, (start, end, payload))
        self._n_intervals += 1

    def overlapping(self, contig: str, start: int, end: int) -> Iterator[tuple[int, int, T]]:
        if contig not in self._intervals:
            return

        i = bisect.bisect_left(self._starts[contig], end)  # use _left since end is exclusive

        for ov in self._intervals[contig][:i]:
            if start < ov[1]:
                yield ov

    def overlaps(self, contig: str, start: int, end: int) -> bool:
        return any(True for _ in self.overlapping(contig, start, end))

    def clear(self) -> None:
        self._starts.clear()
        self._intervals.clear()
        self._n_intervals = 0
