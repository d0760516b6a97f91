"""Level thresholds and computation.

These values MUST match the reader tiers shown on the achievements page.
Tiers are contiguous half-open ranges [min_xp, max_xp). XP at or above the
last tier's floor stays in the last tier.
"""

from __future__ import annotations

LEVEL_THRESHOLDS: list[dict] = [
    {"level": 1, "title": "Beginner Reader", "min_xp": 0, "max_xp": 100},
    {"level": 2, "title": "Apprentice Reader", "min_xp": 100, "max_xp": 500},
    {"level": 3, "title": "Adept Reader", "min_xp": 500, "max_xp": 1000},
    {"level": 4, "title": "Expert Reader", "min_xp": 1000, "max_xp": 2500},
    {"level": 5, "title": "Master Reader", "min_xp": 2500, "max_xp": 5000},
    {"level": 6, "title": "Legend Reader", "min_xp": 5000, "max_xp": 10000},
]


def compute_level(total_xp: int) -> dict:
    """Compute level info from total XP.

    Tiers are checked from the highest floor down; the first floor <= total_xp wins.
    ``progress_percent`` is for display only and is clamped to [0, 100].
    At max level ``next_level``, ``next_title``, ``next_level_xp`` and
    ``xp_to_next_level`` are None.
    """
    index = 0
    for i in range(len(LEVEL_THRESHOLDS) - 1, -1, -1):
        if total_xp >= LEVEL_THRESHOLDS[i]["min_xp"]:
            index = i
            break

    current = LEVEL_THRESHOLDS[index]
    next_tier = LEVEL_THRESHOLDS[index + 1] if index + 1 < len(LEVEL_THRESHOLDS) else None

    xp_into_level = total_xp - current["min_xp"]
    xp_for_level = current["max_xp"] - current["min_xp"]
    progress = min(max(xp_into_level / xp_for_level * 100, 0.0), 100.0)

    return {
        "level": current["level"],
        "title": current["title"],
        "min_xp": current["min_xp"],
        "max_xp": current["max_xp"],
        "xp_into_level": xp_into_level,
        "xp_for_level": xp_for_level,
        "progress_percent": progress,
        "next_level": next_tier["level"] if next_tier else None,
        "next_title": next_tier["title"] if next_tier else None,
        "next_level_xp": next_tier["min_xp"] if next_tier else None,
        "xp_to_next_level": next_tier["min_xp"] - total_xp if next_tier else None,
        "is_max_level": next_tier is None,
    }
