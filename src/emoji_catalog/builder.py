#builder.py
import logging
from itertools import product
from typing import Dict, FrozenSet, Iterable, Iterator, Optional, Tuple

import regex

from .errors import DataIntegrityError, MalformedRowError
from .models import EmojiRecord, EmojiRow, SkinToneModifier

# --- Name heuristics ---
# The source table has no "accepts a skin tone" column, so capability is guessed
# from words in the CLDR short name.
SKIN_TONE_KEYWORDS: FrozenSet[str] = frozenset({
    "hand", "person", "people", "gesture",
    "walking", "standing", "kneeling", "running", "sitting",
})
DUAL_SKIN_TONE_KEYWORDS: FrozenSet[str] = frozenset({
    "handshake", "people holding hands", "couple", "family", "kiss",
})

MAX_CODE_POINT = 0x10FFFF
SURROGATE_FIRST = 0xD800
SURROGATE_LAST = 0xDFFF
PROGRESS_EVERY = 100

# A code point token as printed in the charts: "1F600" or "U+1F600".
_CODE_POINT_TOKEN = regex.compile(r"(?:[Uu]\+)?([0-9A-Fa-f]{1,6})")


def parse_code_points(code_text: str, name: Optional[str] = None) -> Tuple[int, ...]:
    """
    Converts a whitespace separated list of hex code points into integers.

    Raises:
        MalformedRowError: the field is empty, holds a non-hex token, a surrogate
            or a value outside the Unicode range. The page layout has changed if this happens,
            so the error is not handled per row.
    """
    tokens = code_text.split()
    if not tokens:
        raise MalformedRowError(code_text, "no code points", name)
    code_points = []
    for token in tokens:
        match = _CODE_POINT_TOKEN.fullmatch(token)
        if not match:
            raise MalformedRowError(code_text, f"'{token}' is not a hexadecimal code point", name)
        value = int(match.group(1), 16)
        if value > MAX_CODE_POINT:
            raise MalformedRowError(code_text, f"U+{value:X} is beyond U+10FFFF", name)
        if SURROGATE_FIRST <= value <= SURROGATE_LAST:
            raise MalformedRowError(code_text, f"U+{value:X} is a surrogate, not a character", name)
        code_points.append(value)
    return tuple(code_points)


def _matches_any(name: str, keywords: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in keywords)


def supports_skin_tone(name: str, keywords: Iterable[str] = SKIN_TONE_KEYWORDS) -> bool:
    return _matches_any(name, keywords)


def supports_dual_skin_tone(name: str, keywords: Iterable[str] = DUAL_SKIN_TONE_KEYWORDS) -> bool:
    return _matches_any(name, keywords)


def expand_variants(emoji: str, base: EmojiRecord) -> Iterator[Tuple[str, EmojiRecord]]:
    """
    Yields the generated skin tone variants of a base record.

    Five single-tone variants when the base accepts a skin tone, plus one variant
    per ordered pair of modifiers (25) when it also accepts two.
    """
    if not base.skin_tone_support:
        return
    for modifier in SkinToneModifier:
        yield emoji + modifier.char, EmojiRecord(
            name=f"{base.name} ({modifier.label})",
            group=base.group,
            skin_tone_support=True,
            dual_skin_tone_support=False,
            code_points=base.code_points + (modifier.code_point,),
            is_variant=True,
            base_emoji=emoji,
        )
    if not base.dual_skin_tone_support:
        return
    for first, second in product(SkinToneModifier, repeat=2):
        yield emoji + first.char + second.char, EmojiRecord(
            name=f"{base.name} ({first.label} and {second.label})",
            group=base.group,
            skin_tone_support=True,
            dual_skin_tone_support=True,
            code_points=base.code_points + (first.code_point, second.code_point),
            is_variant=True,
            base_emoji=emoji,
        )


def build_base_record(row: EmojiRow) -> Tuple[str, EmojiRecord]:
    code_points = parse_code_points(row.code, row.name)
    emoji = "".join(chr(cp) for cp in code_points)
    return emoji, EmojiRecord(
        name=row.name,
        group=row.group,
        skin_tone_support=supports_skin_tone(row.name),
        dual_skin_tone_support=supports_dual_skin_tone(row.name),
        code_points=code_points,
    )


def verify_variant_references(records: Dict[str, EmojiRecord]) -> None:
    """Raises DataIntegrityError if a variant points at a missing or variant record."""
    for emoji, record in records.items():
        if not record.is_variant:
            continue
        base = records.get(record.base_emoji)
        if base is None or base.is_variant:
            raise DataIntegrityError(
                f"Variant '{record.name}' ({emoji!r}) refers to {record.base_emoji!r}, "
                f"which is not a base emoji record."
            )


def build_emoji_records(rows: Iterable[EmojiRow]) -> Dict[str, EmojiRecord]:
    """
    Builds the emoji index from the rows of the full emoji list.

    Each row produces its base record followed by its generated variants. Keys that
    come up twice keep the record written last.
    """
    logging.info("Starting to parse emoji data...")
    records: Dict[str, EmojiRecord] = {}
    processed = 0
    for row in rows:
        emoji, base = build_base_record(row)
        records[emoji] = base
        for variant_key, variant in expand_variants(emoji, base):
            records[variant_key] = variant
        processed += 1
        if processed % PROGRESS_EVERY == 0:
            logging.info(f"Processed {processed} emojis...")

    verify_variant_references(records)
    logging.info(f"Finished parsing. Total emojis processed: {processed}")
    logging.info(f"Total entries in emoji data: {len(records)}")
    return records
