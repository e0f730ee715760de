import logging
from pathlib import Path
from pydantic import BaseModel, Field, NonNegativeInt

from .ploidy import DEFAULT_PLOIDY, PloidyMap

__all__ = [
    "BUNDLED_PLOIDY_PRESETS",
    "PRESET_OPTIONS_HELP_TEXT",
    "PloidyPreset",
    "load_ploidy_preset",
    "load_ploidy_map",
]

PLOIDY_PRESET_BASE_PATH = Path(__file__).parent / "data" / "ploidy_presets"
GRCH37_PATH = PLOIDY_PRESET_BASE_PATH / "GRCh37.json"
GRCH38_PATH = PLOIDY_PRESET_BASE_PATH / "GRCh38.json"

BUNDLED_PLOIDY_PRESETS: dict[str, Path] = {
    # aliases for GRCh37.json:
    "GRCh37": GRCH37_PATH,
    "hg19": GRCH37_PATH,
    # aliases for GRCh38.json:
    "GRCh38": GRCH38_PATH,
    "hg38": GRCH38_PATH,
    "haploid": PLOIDY_PRESET_BASE_PATH / "haploid.json",
    "diploid": PLOIDY_PRESET_BASE_PATH / "diploid.json",
}
BUNDLED_PLOIDY_PRESETS_KEYS = tuple(BUNDLED_PLOIDY_PRESETS.keys())


def _build_preset_options_help():
    ht = ""

    for i, (k, v) in enumerate(BUNDLED_PLOIDY_PRESETS.items()):
        if i > 0:
            if BUNDLED_PLOIDY_PRESETS[BUNDLED_PLOIDY_PRESETS_KEYS[i - 1]] == v:
                ht += f"/{k}"
            else:
                ht += f", {k}"
        else:
            ht += k

    return ht


PRESET_OPTIONS_HELP_TEXT = _build_preset_options_help()


class PloidyPreset(BaseModel):
    about: str
    default: NonNegativeInt = DEFAULT_PLOIDY
    regions: list[str] = Field(default_factory=lambda: [])

    def build(self, default: int | None = None, logger: logging.Logger | None = None) -> PloidyMap:
        """
        Build a ploidy map from the preset's region rules (1-based coordinates.)
        :param default: Default ploidy, overriding the preset's own default if specified.
        :param logger: Logger for the ploidy map.
        """
        return PloidyMap.from_string(
            "\n".join(self.regions), default=self.default if default is None else default, logger=logger
        )


def _is_preset_path(p: Path) -> bool:
    return p.suffix.lower() == ".json"


def load_ploidy_preset(id_or_path: Path | str) -> PloidyPreset:
    """
    Load a ploidy preset from a specified location - either a string ID of a bundled preset or a path to a JSON file.
    :param id_or_path: String ID of a bundled preset, or a string/Path object pointing to a JSON file.
    :return: Validated, typed version of the loaded ploidy preset.
    """

    preset_path: Path
    if isinstance(id_or_path, str):
        if id_or_path in BUNDLED_PLOIDY_PRESETS:
            preset_path = BUNDLED_PLOIDY_PRESETS[id_or_path]
        else:
            preset_path = Path(id_or_path)
    else:
        preset_path = id_or_path

    with open(preset_path, "r") as fh:
        return PloidyPreset.model_validate_json(fh.read())


def load_ploidy_map(
    id_or_path: Path | str, default: int | None = None, logger: logging.Logger | None = None
) -> PloidyMap | None:
    """
    Load a ploidy map from a bundled preset ID, a JSON preset file, or a plain-text ploidy table.
    :param id_or_path: Bundled preset ID or path to a preset (.json) or ploidy table (any other extension.)
    :param default: Default ploidy; for presets, overrides the preset's own default.
    :param logger: Logger for the ploidy map.
    :return: The loaded ploidy map, or None if a ploidy table file could not be read.
    """

    if (isinstance(id_or_path, str) and id_or_path in BUNDLED_PLOIDY_PRESETS) or _is_preset_path(Path(id_or_path)):
        return load_ploidy_preset(id_or_path).build(default=default, logger=logger)

    return PloidyMap.from_file(id_or_path, default=DEFAULT_PLOIDY if default is None else default, logger=logger)
