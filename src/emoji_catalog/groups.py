#groups.py
from typing import Dict, List

from .models import CategorySummary, EmojiRecord, GroupMember

COMPONENT_GROUP = "Component"


def group_by_category(records: Dict[str, EmojiRecord]) -> List[CategorySummary]:
    """
    Groups the base emojis by category, keeping the order in which categories first
    appear. Variants are left out; they hang off their base record.
    """
    groups: Dict[str, CategorySummary] = {}
    for emoji, record in records.items():
        summary = groups.setdefault(record.group, CategorySummary(name=record.group))
        if record.is_variant:
            continue
        summary.emojis.append(GroupMember(
            emoji=emoji,
            name=record.name,
            skin_tone_support=record.skin_tone_support,
            dual_skin_tone_support=record.dual_skin_tone_support,
        ))
    return list(groups.values())


def ordered_emoji(records: Dict[str, EmojiRecord]) -> List[str]:
    # Plain str ordering compares code point by code point.
    return sorted(records)


def component_emoji(records: Dict[str, EmojiRecord]) -> Dict[str, EmojiRecord]:
    return {emoji: record for emoji, record in records.items() if record.group == COMPONENT_GROUP}
