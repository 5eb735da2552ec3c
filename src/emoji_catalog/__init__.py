from .builder import build_emoji_records, supports_dual_skin_tone, supports_skin_tone
from .config import CatalogConfig
from .counts import reconcile_counts
from .errors import (
    DataIntegrityError,
    EmojiCatalogError,
    FatalFetchError,
    MalformedRowError,
    SelfTestFailure,
    TransientFetchError,
)
from .groups import group_by_category, ordered_emoji
from .models import CategorySummary, CountStats, EmojiRecord, SkinToneModifier
from .pipeline import EmojiCatalogGenerator, build_catalog
from .rows import extract_count_rows, extract_emoji_rows
from .selftest import run_self_test

__version__ = "0.1.0"
