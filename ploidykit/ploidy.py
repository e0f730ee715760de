from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, NamedTuple

import numpy as np

from .exceptions import FieldCountError, InvalidPloidyError
from .intervals import RegionIndex, parse_region_record
from .logger import get_main_logger
from .sexes import SexRegistry

__all__ = [
    "DEFAULT_PLOIDY",
    "SexPloidy",
    "ResolvedPloidy",
    "PloidyMap",
]

DEFAULT_PLOIDY: int = 2

# signed base-10 integer prefix of the PLOIDY field; anything after it is ignored
RE_PLOIDY = re.compile(r"^[+-]?[0-9]+")
RE_LINE_BREAK = re.compile(r"[\r\n]+")


class SexPloidy(NamedTuple):
    sex: int
    ploidy: int


class ResolvedPloidy(NamedTuple):
    sex_ploidy: np.ndarray  # indexed by sex ID
    min_ploidy: int
    max_ploidy: int
    overlap: bool  # whether any region entry covered the queried position


class PloidyMap:
    """
    Region-based ploidy configuration: a default ploidy, plus a table of (contig, interval, sex, ploidy) rules which
    override the default for a given sex within a region. Built once via from_file/from_string (or incrementally via
    add_region_line/add_region), then queried per position with resolve().
    """

    def __init__(self, default: int = DEFAULT_PLOIDY, one_based: bool = True, logger: logging.Logger | None = None):
        if default < 0:
            raise ValueError(f"Default ploidy must be non-negative (got {default})")

        self._default: int = default
        self._one_based: bool = one_based
        self._logger: logging.Logger = logger or get_main_logger()

        self._sexes: SexRegistry = SexRegistry()
        self._regions: RegionIndex[SexPloidy] = RegionIndex()

        # Min/max over entries whose ploidy differs from the default; start at the default.
        self._min: int = default
        self._max: int = default

        self._closed: bool = False

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        default: int = DEFAULT_PLOIDY,
        one_based: bool = True,
        logger: logging.Logger | None = None,
    ) -> PloidyMap | None:
        """
        Load a ploidy table file with one CHROM START END SEX PLOIDY rule per line.
        :param path: Path to the ploidy table.
        :param default: Ploidy to use wherever no rule applies.
        :param one_based: Whether START/END are 1-based closed (default) or 0-based half-open coordinates.
        :param logger: Logger to use; defaults to the main package logger.
        :return: The loaded ploidy map, or None if the file could not be read. Malformed lines raise PloidyParseError.
        """

        pm = cls(default, one_based=one_based, logger=logger)

        try:
            with open(path, "r") as fh:
                pm._load_lines(fh)
        except (OSError, UnicodeDecodeError) as e:
            pm._logger.error(f"Could not read ploidy table from '{path}': {e}")
            return None

        pm._log_loaded(str(path))
        return pm

    @classmethod
    def from_string(
        cls,
        text: str,
        default: int = DEFAULT_PLOIDY,
        one_based: bool = True,
        logger: logging.Logger | None = None,
    ) -> PloidyMap:
        """
        Build a ploidy map from an inline string of newline- or carriage return-separated rules, e.g. a preset.
        """

        pm = cls(default, one_based=one_based, logger=logger)
        pm._load_lines(RE_LINE_BREAK.split(text))
        pm._log_loaded("string")
        return pm

    def __enter__(self) -> PloidyMap:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._regions)

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("Operation on closed ploidy map")

    def _load_lines(self, lines: Iterable[str]) -> None:
        for line_no, line in enumerate(lines, 1):
            self.add_region_line(line, line_no=line_no)

    def _log_loaded(self, source: str) -> None:
        self._logger.debug(
            "Loaded %d ploidy regions from %s: sexes=%s, default=%d, min=%d, max=%d",
            len(self._regions),
            source,
            self._sexes.labels,
            self._default,
            self.global_min_ploidy(),
            self.global_max_ploidy(),
        )

    # Loading ---------------------------------------------------------------------------------------------------------

    def _parse_line(self, line: str, line_no: int | None) -> tuple[str, int, int, str, int] | None:
        record = parse_region_record(line, one_based=self._one_based, line_no=line_no)
        if record is None:
            return None

        contig, start, end, rest = record
        line = line.strip()

        ps = rest.split(maxsplit=1)
        if len(ps) < 2:
            raise FieldCountError("wrong number of fields", line, line_no)

        sex, ploidy_str = ps
        if (m := RE_PLOIDY.match(ploidy_str)) is None:
            raise InvalidPloidyError(f"invalid ploidy '{ploidy_str}'", line, line_no)

        if (ploidy := int(m.group(0))) < 0:
            raise InvalidPloidyError(f"negative ploidy '{ploidy_str}'", line, line_no)

        return contig, start, end, sex, ploidy

    def add_region_line(self, line: str, line_no: int | None = None) -> bool:
        """
        Parse and store a single CHROM START END SEX PLOIDY rule. The line is fully parsed before the sex registry or
        region table are touched, so a rejected line leaves this map unchanged.
        :param line: The rule text.
        :param line_no: Line number, for error messages.
        :return: Whether a rule was added (False for blank or comment lines.)
        """

        self._check_open()

        if (parsed := self._parse_line(line, line_no)) is None:
            return False

        self.add_region(*parsed)
        return True

    def add_region(self, contig: str, start: int, end: int, sex: str, ploidy: int) -> None:
        """
        Store a rule for a 0-based, half-open [start, end) interval, registering the sex label if it is new.
        """

        self._check_open()

        if start < 0 or end <= start:
            raise ValueError(f"Invalid interval [{start}, {end})")
        if ploidy < 0:
            raise ValueError(f"Ploidy must be non-negative (got {ploidy})")

        sex_id = self._sexes.get_or_create(sex)

        if ploidy != self._default:
            self._min = min(self._min, ploidy)
            self._max = max(self._max, ploidy)

        self._regions.insert(contig, start, end, SexPloidy(sex_id, ploidy))

    # Sexes -----------------------------------------------------------------------------------------------------------

    def sex_count(self) -> int:
        self._check_open()
        return len(self._sexes)

    @property
    def sex_labels(self) -> tuple[str, ...]:
        self._check_open()
        return self._sexes.labels

    def register_sex(self, label: str) -> int:
        self._check_open()
        return self._sexes.get_or_create(label)

    def id_of(self, label: str) -> int | None:
        self._check_open()
        return self._sexes.id_of(label)

    def label_of(self, sex_id: int) -> str | None:
        self._check_open()
        return self._sexes.label_of(sex_id)

    # Queries ---------------------------------------------------------------------------------------------------------

    @property
    def default(self) -> int:
        return self._default

    @property
    def contigs(self) -> tuple[str, ...]:
        self._check_open()
        return self._regions.contigs

    def global_min_ploidy(self) -> int:
        self._check_open()
        return min(self._default, self._min)

    def global_max_ploidy(self) -> int:
        self._check_open()
        return max(self._default, self._max)

    def overlapping(self, contig: str, pos: int) -> list[SexPloidy]:
        self._check_open()
        return [sp for _, _, sp in self._regions.overlapping(contig, pos, pos + 1)]

    def overlaps(self, contig: str, pos: int) -> bool:
        self._check_open()
        return self._regions.overlaps(contig, pos, pos + 1)

    def resolve(self, contig: str, pos: int, out: np.ndarray | None = None) -> ResolvedPloidy:
        """
        Resolve the ploidy of every registered sex at a position.
        :param contig: Contig name. Unknown contigs resolve to the default ploidy.
        :param pos: 0-based position.
        :param out: Optional caller-owned integer array of length >= sex_count() to write per-sex ploidies into.
        :return: Per-sex ploidy array, indexed by sex ID, plus the min/max ploidy among overriding rules which cover
                 the position (both equal to the default if there are none.)
        """

        self._check_open()

        dflt = self._default
        n_sexes = len(self._sexes)

        if out is None:
            sex_ploidy = np.full(n_sexes, dflt, dtype=np.int32)
        else:
            if out.shape[0] < n_sexes:
                raise ValueError(f"Output buffer too small: {out.shape[0]} < {n_sexes} sexes")
            sex_ploidy = out[:n_sexes]
            sex_ploidy.fill(dflt)

        overlap: bool = False
        min_p: int | None = None
        max_p: int | None = None

        for _, _, sp in self._regions.overlapping(contig, pos, pos + 1):
            overlap = True

            # Rules repeating the default do not erase an earlier override for the same sex.
            if sp.ploidy == dflt:
                continue

            # Later rules (in index order) for the same sex win.
            sex_ploidy[sp.sex] = sp.ploidy

            if min_p is None or sp.ploidy < min_p:
                min_p = sp.ploidy
            if max_p is None or sp.ploidy > max_p:
                max_p = sp.ploidy

        if min_p is None:
            min_p = max_p = dflt

        return ResolvedPloidy(sex_ploidy, min_p, max_p, overlap)

    def ploidy_of(self, contig: str, pos: int, sex: str) -> int | None:
        self._check_open()

        if (sex_id := self._sexes.id_of(sex)) is None:
            return None

        ploidy = self._default
        for sp in self.overlapping(contig, pos):
            if sp.sex == sex_id and sp.ploidy != self._default:
                ploidy = sp.ploidy
        return ploidy

    def to_dict(self) -> dict:
        self._check_open()
        return {
            "default": self._default,
            "min": self.global_min_ploidy(),
            "max": self.global_max_ploidy(),
            "sexes": list(self._sexes.labels),
            "n_regions": len(self._regions),
            "contigs": list(self._regions.contigs),
        }

    def close(self) -> None:
        if self._closed:
            return
        self._regions.clear()
        self._sexes = SexRegistry()
        self._closed = True
