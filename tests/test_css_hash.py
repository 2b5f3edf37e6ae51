import pytest

from lexkit.css.hash import Hash, to_hash


@pytest.mark.parametrize("member", list(Hash))
def test_round_trip_through_name(member):
    assert to_hash(str(member)) is member
    assert to_hash(str(member).encode("ascii")) is member


def test_known_names():
    assert to_hash(b"font-face") is Hash.FONT_FACE
    assert to_hash(b"keyframes") is Hash.KEYFRAMES
    assert to_hash(b"supports") is Hash.SUPPORTS


def test_case_sensitive():
    assert to_hash(b"Media") is None
    assert to_hash(b"DOCUMENT") is None


@pytest.mark.parametrize("name", [b"", b"viewport", b"font-face-extra", b"pag"])
def test_unknown_names(name):
    assert to_hash(name) is None


def test_every_name_maps_to_a_distinct_member():
    found = [to_hash(str(member)) for member in Hash]
    assert len(set(found)) == len(found) == 6