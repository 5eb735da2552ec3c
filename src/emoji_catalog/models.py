#models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SkinToneModifier(Enum):
    """The five Fitzpatrick modifiers, in the order Unicode lists them."""
    LIGHT = (0x1F3FB, "light skin tone")
    MEDIUM_LIGHT = (0x1F3FC, "medium-light skin tone")
    MEDIUM = (0x1F3FD, "medium skin tone")
    MEDIUM_DARK = (0x1F3FE, "medium-dark skin tone")
    DARK = (0x1F3FF, "dark skin tone")

    def __init__(self, code_point: int, label: str):
        self.code_point = code_point
        self.label = label

    @property
    def char(self) -> str:
        return chr(self.code_point)


@dataclass(frozen=True)
class EmojiRow:
    """One row of the full emoji list: code point text, name and group cell."""
    code: str
    name: str
    group: str


@dataclass(frozen=True)
class CountRow:
    """One row of the emoji counts table: the label cell and the count cell."""
    label: str
    count: str


@dataclass(frozen=True)
class EmojiRecord:
    name: str
    group: str
    skin_tone_support: bool
    dual_skin_tone_support: bool
    code_points: Tuple[int, ...]
    is_variant: bool = False
    base_emoji: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "group": self.group,
            "skin_tone_support": self.skin_tone_support,
            "dual_skin_tone_support": self.dual_skin_tone_support,
            "is_variant": self.is_variant,
            "base_emoji": self.base_emoji,
            "code_points": list(self.code_points),
        }


@dataclass(frozen=True)
class GroupMember:
    emoji: str
    name: str
    skin_tone_support: bool
    dual_skin_tone_support: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emoji": self.emoji,
            "name": self.name,
            "skin_tone_support": self.skin_tone_support,
            "dual_skin_tone_support": self.dual_skin_tone_support,
        }


@dataclass
class CategorySummary:
    name: str
    emojis: List[GroupMember] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "emojis": [m.to_dict() for m in self.emojis]}


@dataclass(frozen=True)
class CountStats:
    """
    Totals read from the emoji counts table.

    total_without_skin_tone_variations is always
    total_with_variations - skin_tone_variations - component.
    dual_skin_tone_support is None when the emoji list was not available.
    """
    total_without_skin_tone_variations: int
    component: int
    dual_skin_tone_support: Optional[int]
    groups: Dict[str, int]
    total_with_variations: int
    skin_tone_variations: int
    emoji_version: Optional[str] = None
    last_update: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "total_without_skin_tone_variations": self.total_without_skin_tone_variations,
            "component": self.component,
            "groups": dict(self.groups),
            "total_with_variations": self.total_with_variations,
            "skin_tone_variations": self.skin_tone_variations,
        }
        if self.dual_skin_tone_support is not None:
            data["dual_skin_tone_support"] = self.dual_skin_tone_support
        if self.emoji_version is not None:
            data["emoji_version"] = self.emoji_version
        if self.last_update is not None:
            data["last_update"] = self.last_update
        return data
