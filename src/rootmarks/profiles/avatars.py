"""Avatar catalog. Ids are stored on the profile; emoji and names are display data."""

from __future__ import annotations

AVATARS: list[dict] = [
    {"id": "default", "emoji": "\U0001F331", "name": "Sprout"},
    {"id": "tree", "emoji": "\U0001F333", "name": "Tree"},
    {"id": "flower", "emoji": "\U0001F338", "name": "Flower"},
    {"id": "sunflower", "emoji": "\U0001F33B", "name": "Sunflower"},
    {"id": "cactus", "emoji": "\U0001F335", "name": "Cactus"},
    {"id": "book", "emoji": "\U0001F4DA", "name": "Bookworm"},
    {"id": "star", "emoji": "⭐", "name": "Star Reader"},
    {"id": "butterfly", "emoji": "\U0001F98B", "name": "Butterfly"},
    {"id": "bee", "emoji": "\U0001F41D", "name": "Busy Bee"},
    {"id": "owl", "emoji": "\U0001F989", "name": "Wise Owl"},
    {"id": "fox", "emoji": "\U0001F98A", "name": "Clever Fox"},
    {"id": "cat", "emoji": "\U0001F431", "name": "Cozy Cat"},
    {"id": "dragon", "emoji": "\U0001F409", "name": "Book Dragon"},
    {"id": "unicorn", "emoji": "\U0001F984", "name": "Unicorn"},
    {"id": "rainbow", "emoji": "\U0001F308", "name": "Rainbow"},
    {"id": "mushroom", "emoji": "\U0001F344", "name": "Mushroom"},
]

_AVATAR_IDS = frozenset(a["id"] for a in AVATARS)


def is_known_avatar(avatar_id: str) -> bool:
    return avatar_id in _AVATAR_IDS


def avatar_emoji(avatar_id: str) -> str:
    """Emoji for an avatar id, falling back to the default sprout."""
    for avatar in AVATARS:
        if avatar["id"] == avatar_id:
            return avatar["emoji"]
    return AVATARS[0]["emoji"]
