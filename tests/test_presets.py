import pathlib
import pytest

from ploidykit.presets import (
    BUNDLED_PLOIDY_PRESETS,
    PRESET_OPTIONS_HELP_TEXT,
    PloidyPreset,
    load_ploidy_map,
    load_ploidy_preset,
)

TEST_PLOIDY = pathlib.Path(__file__).parent / "data" / "test_ploidy.txt"


def test_preset_validation():
    p = PloidyPreset.model_validate({"about": "test"})
    assert p.default == 2
    assert p.regions == []

    p = PloidyPreset.model_validate({"about": "test", "default": 1, "regions": ["chrY 1 100 F 0"]})
    pm = p.build()
    assert pm.default == 1
    assert pm.resolve("chrY", 50).sex_ploidy.tolist() == [0]

    with pytest.raises(ValueError):
        PloidyPreset.model_validate({"default": 2})

    with pytest.raises(ValueError):
        PloidyPreset.model_validate({"about": "test", "default": -1})

    with pytest.raises(ValueError):
        PloidyPreset.model_validate({"about": "test", "regions": "chrY 1 100 F 0"})


def test_preset_help_text():
    assert PRESET_OPTIONS_HELP_TEXT == "GRCh37/hg19, GRCh38/hg38, haploid, diploid"


@pytest.mark.parametrize("preset_id", tuple(BUNDLED_PLOIDY_PRESETS.keys()))
def test_bundled_presets_load(preset_id: str):
    preset = load_ploidy_preset(preset_id)
    pm = preset.build()
    assert pm.default == preset.default
    assert len(pm) == len(preset.regions)


def test_preset_grch38():
    pm = load_ploidy_map("GRCh38")
    assert pm.sex_labels == ("M", "F")
    assert (pm.global_min_ploidy(), pm.global_max_ploidy()) == (0, 2)

    for x in ("X", "chrX"):
        assert pm.resolve(x, 4999).sex_ploidy.tolist() == [1, 2]
        assert pm.resolve(x, 100000).sex_ploidy.tolist() == [2, 2]  # PAR1
        assert pm.resolve(x, 5000000).sex_ploidy.tolist() == [1, 2]

    res = pm.resolve("chrY", 1000)
    assert res.sex_ploidy.tolist() == [1, 0]
    assert (res.min_ploidy, res.max_ploidy) == (0, 1)

    assert pm.resolve("chrM", 100).sex_ploidy.tolist() == [1, 1]
    assert pm.resolve("chr1", 100).sex_ploidy.tolist() == [2, 2]

    hg38 = load_ploidy_map("hg38")
    assert len(hg38) == len(pm)


def test_preset_grch37():
    pm = load_ploidy_map("GRCh37")
    assert pm.resolve("X", 59999).sex_ploidy.tolist() == [1, 2]
    assert pm.resolve("X", 60000).sex_ploidy.tolist() == [2, 2]
    assert pm.resolve("Y", 0).sex_ploidy.tolist() == [1, 0]


def test_preset_default_override():
    pm = load_ploidy_map("GRCh37", default=4)
    assert pm.default == 4
    assert pm.resolve("1", 100).sex_ploidy.tolist() == [4, 4]
    assert (pm.global_min_ploidy(), pm.global_max_ploidy()) == (0, 4)


def test_preset_trivial():
    pm = load_ploidy_map("haploid")
    assert pm.sex_count() == 0
    res = pm.resolve("chr1", 100)
    assert res.sex_ploidy.tolist() == []
    assert (res.min_ploidy, res.max_ploidy) == (1, 1)

    pm = load_ploidy_map("diploid")
    pm.register_sex("F")
    assert pm.resolve("chrX", 100).sex_ploidy.tolist() == [2]


def test_load_ploidy_map_files(tmp_path: pathlib.Path):
    pm = load_ploidy_map(TEST_PLOIDY)
    assert pm is not None
    assert pm.default == 2
    assert pm.resolve("chr1", 174).sex_ploidy.tolist() == [1, 3]

    pm = load_ploidy_map(str(TEST_PLOIDY), default=3)
    assert pm.resolve("chr22", 0).sex_ploidy.tolist() == [3, 3]

    assert load_ploidy_map(tmp_path / "does_not_exist.txt") is None

    preset_path = tmp_path / "custom.json"
    preset_path.write_text('{"about": "custom", "default": 3, "regions": ["chr1 1 10 A 1"]}')
    pm = load_ploidy_map(preset_path)
    assert pm.default == 3
    assert pm.resolve("chr1", 0).sex_ploidy.tolist() == [1]

    with pytest.raises(OSError):
        load_ploidy_map(tmp_path / "does_not_exist.json")
