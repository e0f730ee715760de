import pytest
from ploidykit.utils import parse_locus


def test_parse_locus():
    assert parse_locus("chrX:1") == ("chrX", 0)
    assert parse_locus("chrX:2,781,480") == ("chrX", 2781479)
    assert parse_locus("HLA-A*01:01:01:01:100") == ("HLA-A*01:01:01:01", 99)

    with pytest.raises(ValueError):
        parse_locus("chrX")
    with pytest.raises(ValueError):
        parse_locus(":100")
    with pytest.raises(ValueError):
        parse_locus("chrX:0")
    with pytest.raises(ValueError):
        parse_locus("chrX:abc")
