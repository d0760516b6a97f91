"""Level computation tests: tier boundaries and max-level clamping."""

import pytest

from rootmarks.gamification.level_thresholds import LEVEL_THRESHOLDS, compute_level


class TestLevelComputation:
    """Tiers are half-open [min_xp, max_xp) ranges."""

    def test_level_1_at_zero_xp(self):
        result = compute_level(0)
        assert result["level"] == 1
        assert result["title"] == "Beginner Reader"

    def test_level_boundary_99_xp(self):
        """99 XP is still level 1."""
        result = compute_level(99)
        assert result["level"] == 1
        assert result["xp_to_next_level"] == 1

    def test_level_2_at_100_xp(self):
        result = compute_level(100)
        assert result["level"] == 2
        assert result["title"] == "Apprentice Reader"

    def test_level_3_at_500_xp(self):
        result = compute_level(500)
        assert result["level"] == 3
        assert result["title"] == "Adept Reader"

    def test_legend_at_5000_xp(self):
        result = compute_level(5000)
        assert result["level"] == 6
        assert result["title"] == "Legend Reader"

    def test_xp_into_level_calculation(self):
        result = compute_level(150)  # 50 XP into level 2
        assert result["xp_into_level"] == 50
        assert result["xp_for_level"] == 400
        assert result["progress_percent"] == pytest.approx(12.5)

    def test_next_level_fields(self):
        result = compute_level(1200)
        assert result["level"] == 4
        assert result["next_level"] == 5
        assert result["next_title"] == "Master Reader"
        assert result["next_level_xp"] == 2500
        assert result["xp_to_next_level"] == 1300
        assert result["is_max_level"] is False

    def test_max_level_exceeded(self):
        """XP beyond the last tier stays at Legend Reader with no next tier."""
        result = compute_level(25_000)
        assert result["level"] == 6
        assert result["is_max_level"] is True
        assert result["next_level"] is None
        assert result["next_title"] is None
        assert result["next_level_xp"] is None
        assert result["xp_to_next_level"] is None
        assert result["progress_percent"] == 100.0

    @pytest.mark.parametrize("xp", [0, 1, 99, 100, 499, 500, 999, 1000, 2499, 2500, 4999, 5000, 9999])
    def test_min_xp_never_exceeds_xp(self, xp):
        result = compute_level(xp)
        assert result["min_xp"] <= xp
        assert 0.0 <= result["progress_percent"] <= 100.0
        if result["next_level_xp"] is not None:
            assert xp < result["next_level_xp"]


class TestLevelTable:
    def test_six_tiers(self):
        assert [t["level"] for t in LEVEL_THRESHOLDS] == [1, 2, 3, 4, 5, 6]

    def test_tiers_are_contiguous(self):
        assert LEVEL_THRESHOLDS[0]["min_xp"] == 0
        for lower, upper in zip(LEVEL_THRESHOLDS, LEVEL_THRESHOLDS[1:]):
            assert lower["max_xp"] == upper["min_xp"]
            assert lower["min_xp"] < lower["max_xp"]
