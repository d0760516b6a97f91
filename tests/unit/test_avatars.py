"""Avatar catalog tests."""

from rootmarks.profiles.avatars import AVATARS, avatar_emoji, is_known_avatar


def test_catalog_has_sixteen_unique_ids():
    ids = [a["id"] for a in AVATARS]
    assert len(ids) == 16
    assert len(set(ids)) == 16
    assert ids[0] == "default"


def test_known_and_unknown_ids():
    assert is_known_avatar("owl")
    assert not is_known_avatar("velociraptor")


def test_unknown_emoji_falls_back_to_default():
    assert avatar_emoji("velociraptor") == avatar_emoji("default")
