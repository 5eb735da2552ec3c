#counts.py
# Expected table shape (emoji-counts.html): one header row, then one row per
# category with the label in the first cell and its count in the second, followed
# by "Component", "Total" and "With skin tone variations" summary rows.
import logging
from typing import Dict, Iterable, Optional

from .errors import DataIntegrityError
from .models import CountRow, CountStats

COMPONENT_LABEL = "Component"
TOTAL_LABEL = "Total"
SKIN_TONE_VARIATIONS_LABEL = "With skin tone variations"
HEADER_LABEL = "Group"


def parse_count(text: str) -> Optional[int]:
    """Reads a count cell such as '1,234'. Returns None if it is not a whole number."""
    cleaned = text.replace(",", "").strip()
    if not cleaned.isdecimal():
        return None
    return int(cleaned)


def reconcile_counts(rows: Iterable[CountRow], dual_skin_tone_support: Optional[int] = 0) -> CountStats:
    """
    Reads the counts table and cross-checks its totals.

    The first row is the header and is skipped. Every later row is either one of the
    three summary labels or a per-category count.

    Raises:
        DataIntegrityError: "Total" or "With skin tone variations" is missing or not a
            number, or the derived total without variations comes out negative.
    """
    logging.info("Starting to parse emoji counts...")
    component = None
    total = None
    variations = None
    groups: Dict[str, int] = {}

    row_iter = iter(rows)
    next(row_iter, None)
    for row in row_iter:
        count = parse_count(row.count)
        if row.label == COMPONENT_LABEL:
            component = count
        elif row.label == TOTAL_LABEL:
            total = count
        elif row.label == SKIN_TONE_VARIATIONS_LABEL:
            variations = count
        elif row.label != HEADER_LABEL and count is not None:
            groups[row.label] = count

    if total is None:
        raise DataIntegrityError(f"Counts table has no numeric '{TOTAL_LABEL}' row; cannot reconcile.")
    if variations is None:
        raise DataIntegrityError(
            f"Counts table has no numeric '{SKIN_TONE_VARIATIONS_LABEL}' row; cannot reconcile."
        )
    if component is None:
        logging.warning(f"Counts table has no '{COMPONENT_LABEL}' row, assuming 0.")
        component = 0

    without_variations = total - variations - component
    if without_variations < 0:
        raise DataIntegrityError(
            f"Total without skin tone variations is negative: "
            f"{total} - {variations} - {component} = {without_variations}"
        )

    logging.info(
        f"Reconciled counts: {total} total, {variations} skin tone variations, "
        f"{component} components -> {without_variations} without variations "
        f"across {len(groups)} groups."
    )
    return CountStats(
        total_without_skin_tone_variations=without_variations,
        component=component,
        dual_skin_tone_support=dual_skin_tone_support,
        groups=groups,
        total_with_variations=total,
        skin_tone_variations=variations,
    )
