import numpy as np
import orjson as json


__all__ = [
    "json",
    "dumps",
]

_DUMPS_OPTIONS = json.OPT_NON_STR_KEYS | json.OPT_SERIALIZE_NUMPY


def _dumps_default(x):
    # orjson only serializes C-contiguous arrays natively; per-locus columns of a (sexes x loci) table are strided.
    if isinstance(x, np.ndarray):
        return x.tolist()
    raise TypeError


def dumps(v, indent: bool = False) -> bytes:
    return json.dumps(v, option=_DUMPS_OPTIONS | (json.OPT_INDENT_2 if indent else 0), default=_dumps_default)
