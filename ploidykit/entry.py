from __future__ import annotations

import argparse
import logging
import sys

from typing import Callable, Optional

from ploidykit import __version__
from ploidykit.exceptions import ParamError, InputError, PloidyParseError
from ploidykit.logger import get_main_logger, attach_stream_handler, log_levels
from ploidykit.presets import BUNDLED_PLOIDY_PRESETS, PRESET_OPTIONS_HELP_TEXT


def _add_ploidy_args(parser):
    parser.add_argument(
        "--ploidy", "-p",
        type=str,
        required=True,
        help=f"Bundled ploidy preset ({PRESET_OPTIONS_HELP_TEXT}), a JSON preset file, or a ploidy table file with "
             f"whitespace-separated CHROM START END SEX PLOIDY lines (1-based, closed coordinates).")

    parser.add_argument(
        "--default", "-d",
        type=int,
        help="Default ploidy for positions/sexes without a matching rule. If left out, the preset's default is used "
             "(2 for ploidy table files.)")


def add_summary_parser_args(summary_parser):
    _add_ploidy_args(summary_parser)


def add_query_parser_args(query_parser):
    _add_ploidy_args(query_parser)

    query_parser.add_argument(
        "--sex", "-s",
        type=str,
        action="append",
        help="Additional sex label(s) to report, even if the ploidy table has no rules for them. May be repeated.")

    query_parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Write JSON-formatted results to stdout instead of TSV.")

    query_parser.add_argument(
        "--indent-json", "-i",
        action="store_true",
        help="If passed alongside --json, the JSON output will be indented to be more human readable but less compact.")

    query_parser.add_argument(
        "loci",
        type=str,
        nargs="+",
        help="Loci to query, in the form CONTIG:POS (1-based position.)")


def _load_ploidy_map(p_args, logger):
    from ploidykit.presets import load_ploidy_map

    if p_args.default is not None and p_args.default < 0:
        raise ParamError(f"Default ploidy must be non-negative (got {p_args.default})")

    try:
        pm = load_ploidy_map(p_args.ploidy, default=p_args.default, logger=logger)
    except OSError as e:
        raise InputError(f"Could not load ploidy preset '{p_args.ploidy}': {e}")
    except PloidyParseError:
        raise
    except ValueError as e:  # includes pydantic validation errors
        raise InputError(f"Invalid ploidy preset '{p_args.ploidy}': {e}")

    if pm is None:
        raise InputError(f"Could not load ploidy table '{p_args.ploidy}'")

    return pm


def _exec_presets(_p_args, _logger) -> int:
    from ploidykit.presets import load_ploidy_preset

    for k in BUNDLED_PLOIDY_PRESETS:
        preset = load_ploidy_preset(k)
        sys.stdout.write(f"{k}\t{preset.default}\t{preset.about}\n")
    sys.stdout.flush()

    return 0


def _exec_summary(p_args, logger) -> int:
    from ploidykit.json import dumps

    pm = _load_ploidy_map(p_args, logger)
    sys.stdout.write(dumps(pm.to_dict(), indent=True).decode("utf-8") + "\n")
    sys.stdout.flush()

    return 0


def _exec_query(p_args, logger) -> int:
    import numpy as np
    from ploidykit.json import dumps
    from ploidykit.utils import parse_locus

    pm = _load_ploidy_map(p_args, logger)

    for sex in p_args.sex or ():
        pm.register_sex(sex)

    labels = pm.sex_labels

    loci: list[tuple[str, int]] = []
    for locus in p_args.loci:
        try:
            loci.append(parse_locus(locus))
        except ValueError as e:
            raise ParamError(str(e))

    # (sexes x loci) table; resolve() writes each locus' column in place.
    sex_ploidy = np.empty((len(labels), len(loci)), dtype=np.int32)

    results = []
    for i, (contig, pos) in enumerate(loci):
        res = pm.resolve(contig, pos, out=sex_ploidy[:, i])
        results.append({
            "contig": contig,
            "pos": pos + 1,
            "min": res.min_ploidy,
            "max": res.max_ploidy,
            "sex_ploidy": res.sex_ploidy,
        })

    if p_args.json:
        out = dumps({"sexes": labels, "results": results}, indent=p_args.indent_json)
        sys.stdout.write(out.decode("utf-8") + "\n")
    else:
        for r in results:
            sex_str = ",".join(f"{label}:{p}" for label, p in zip(labels, r["sex_ploidy"].tolist())) or "."
            sys.stdout.write(f"{r['contig']}\t{r['pos']}\t{r['min']}\t{r['max']}\t{sex_str}\n")

    sys.stdout.flush()

    return 0


def main(args: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Region- and sex-aware ploidy lookup for variant calling.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    parser.add_argument("--version", "-v", action="version", version=__version__)

    subparsers = parser.add_subparsers()

    def _make_subparser(arg: str, help_text: str, exec_func: Callable, arg_func: Callable | None = None):
        sp = subparsers.add_parser(arg, help=help_text)
        sp.add_argument("--log-level", type=str, default="warning", choices=("error", "warning", "info", "debug"))
        sp.set_defaults(func=exec_func)
        if arg_func is not None:
            arg_func(sp)

    _make_subparser(
        "presets",
        help_text="List bundled ploidy presets.",
        exec_func=_exec_presets)

    _make_subparser(
        "summary",
        help_text="Summarize a ploidy table or preset: sexes and overall min/max ploidy.",
        exec_func=_exec_summary,
        arg_func=add_summary_parser_args)

    _make_subparser(
        "query",
        help_text="Resolve the per-sex ploidy at one or more loci.",
        exec_func=_exec_query,
        arg_func=add_query_parser_args)

    args = args or sys.argv[1:]
    p_args = parser.parse_args(args)

    ch: logging.Handler | None = None
    if hasattr(p_args, "log_level"):
        ll = log_levels[p_args.log_level]
        logger = get_main_logger(ll)
        ch = attach_stream_handler(ll, logger)
    else:
        logger = get_main_logger()

    if not getattr(p_args, "func", None):
        p_args = parser.parse_args(("--help",))

    try:
        logger.info(f"ploidykit version {__version__}")
        return p_args.func(p_args, logger)
    except ParamError as e:
        logger.critical(f"Parameter error: {e}")
        return 1
    except InputError as e:
        logger.critical(f"Input error: {e}")
        return 1
    except PloidyParseError as e:
        e.log_error(logger)
        return 1
    finally:
        if ch is not None:
            logger.removeHandler(ch)


if __name__ == "__main__":
    exit(main())
