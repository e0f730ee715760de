from __future__ import annotations

__all__ = [
    "parse_locus",
]


def parse_locus(locus: str) -> tuple[str, int]:
    """
    Parse a 1-based CONTIG:POS locus string, e.g. chrX:2,781,480.
    :param locus: Locus string. Contig names may themselves contain colons; the position is after the last one.
    :return: Tuple of (contig, 0-based position).
    """

    contig, sep, pos_str = locus.rpartition(":")
    if not sep or not contig:
        raise ValueError(f"Locus must have the form CONTIG:POS (got '{locus}')")

    pos = int(pos_str.replace(",", ""))
    if pos < 1:
        raise ValueError(f"Locus position must be 1-based (got '{locus}')")

    return contig, pos - 1
