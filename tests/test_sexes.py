from ploidykit.sexes import SexRegistry


def test_sex_registry():
    r = SexRegistry()
    assert len(r) == 0
    assert r.count() == 0
    assert r.label_of(0) is None
    assert r.id_of("M") is None

    assert r.get_or_create("M") == 0
    assert r.get_or_create("F") == 1
    assert r.get_or_create("M") == 0
    assert r.count() == 2
    assert r.labels == ("M", "F")
    assert list(r) == ["M", "F"]

    assert "M" in r
    assert "m" not in r  # case-sensitive
    assert r.get_or_create("m") == 2

    assert r.id_of("F") == 1
    assert r.label_of(1) == "F"
    assert r.label_of(3) is None
    assert r.label_of(-1) is None

    for sex_id in range(r.count()):
        assert r.id_of(r.label_of(sex_id)) == sex_id


def test_sex_registry_initial_labels():
    r = SexRegistry(("F", "M", "F"))
    assert r.labels == ("F", "M")
    assert r.id_of("M") == 1
