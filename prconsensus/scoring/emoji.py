"""Reaction kind to display glyph mapping.

GitHub names reactions differently in REST (`+1`) and GraphQL (`THUMBS_UP`);
both spellings map to the same glyph.
"""

APPROVAL = "👍"
DISAPPROVAL = "👎"
ACKNOWLEDGEMENT = "👀"
STRONG_APPROVAL = "🚀"

_EMOJI_MAP = {
    "+1": APPROVAL,
    "thumbs_up": APPROVAL,
    "-1": DISAPPROVAL,
    "thumbs_down": DISAPPROVAL,
    "laugh": "😄",
    "hooray": "🎉",
    "confused": "😕",
    "heart": "❤️",
    "rocket": STRONG_APPROVAL,
    "eyes": ACKNOWLEDGEMENT,
}


def normalize(raw_kind: str) -> str:
    """Map a reaction kind to its glyph, returning unknown kinds unchanged."""
    return _EMOJI_MAP.get(raw_kind.lower(), raw_kind)


def is_known(raw_kind: str) -> bool:
    return raw_kind.lower() in _EMOJI_MAP
