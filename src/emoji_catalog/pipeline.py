#pipeline.py
import logging
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import httpx

from . import config as cfg
from .builder import build_emoji_records
from .config import CatalogConfig
from .counts import reconcile_counts
from .errors import EmojiCatalogError
from .fetcher import Fetcher, FetchResult, build_client
from .groups import component_emoji, group_by_category, ordered_emoji
from .models import CategorySummary, CountStats, EmojiRecord
from .rows import extract_count_rows, extract_emoji_rows
from .storage import write_json, write_text
from .version import UpdateDecision, check_for_updates, now_ms, parse_latest_version

# ==============================================================================
# SECTION 1: PARSE AND BUILD (shared by the normal run and the self-test)
# ==============================================================================

@dataclass
class EmojiCatalog:
    records: Dict[str, EmojiRecord]
    groups: List[CategorySummary]
    ordered: List[str]
    components: Dict[str, EmojiRecord]

    @property
    def dual_skin_tone_count(self) -> int:
        return sum(1 for r in self.records.values() if not r.is_variant and r.dual_skin_tone_support)


def build_emoji_catalog(emoji_html: str) -> EmojiCatalog:
    records = build_emoji_records(extract_emoji_rows(emoji_html))
    return EmojiCatalog(
        records=records,
        groups=group_by_category(records),
        ordered=ordered_emoji(records),
        components=component_emoji(records),
    )


def build_count_stats(counts_html: str, dual_skin_tone_support: Optional[int] = 0) -> CountStats:
    return reconcile_counts(extract_count_rows(counts_html), dual_skin_tone_support)


def build_catalog(emoji_html: str, counts_html: str) -> Tuple[EmojiCatalog, CountStats]:
    catalog = build_emoji_catalog(emoji_html)
    stats = build_count_stats(counts_html, catalog.dual_skin_tone_count)
    return catalog, stats


def _records_to_json(records: Dict[str, EmojiRecord]) -> dict:
    return {emoji: record.to_dict() for emoji, record in records.items()}


def write_catalog(config: CatalogConfig, catalog: EmojiCatalog) -> List[Path]:
    return [
        write_json(config.output_path(cfg.DATA_BY_EMOJI_FILENAME), _records_to_json(catalog.records)),
        write_json(config.output_path(cfg.DATA_BY_GROUP_FILENAME), [g.to_dict() for g in catalog.groups]),
        write_json(config.output_path(cfg.ORDERED_EMOJI_FILENAME), catalog.ordered),
        write_json(config.output_path(cfg.COMPONENTS_FILENAME), _records_to_json(catalog.components)),
    ]


def write_stats(config: CatalogConfig, stats: CountStats) -> Path:
    return write_json(config.stats_path, stats.to_dict())

# ==============================================================================
# SECTION 2: THE GENERATOR RUN
# ==============================================================================

@dataclass
class RunReport:
    updated: bool
    reason: str = ""
    catalog: Optional[EmojiCatalog] = None
    stats: Optional[CountStats] = None
    written: List[Path] = field(default_factory=list)


class EmojiCatalogGenerator:
    """
    Runs one generation: optional version check, both downloads, parsing, and writing.

    The emoji list and the counts table are independent sources. When one of them
    fails the other's files are still written, then the first failure is raised.
    """

    def __init__(self, config: CatalogConfig, client: Optional[httpx.Client] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], int] = now_ms):
        self.config = config
        self._client = client
        self._sleep = sleep
        self._clock = clock

    def run(self, force: bool = False) -> RunReport:
        if self._client is not None:
            return self._run(Fetcher(self._client, self.config, self._sleep), force)
        with build_client(self.config) as client:
            return self._run(Fetcher(client, self.config, self._sleep), force)

    def _run(self, fetcher: Fetcher, force: bool) -> RunReport:
        decision = UpdateDecision(True, "Forced update." if force else "Automatic update checks are disabled.")
        if self.config.auto_update and not force:
            decision = check_for_updates(self.config, fetcher.fetch_text, self._clock)
        logging.info(decision.reason)
        if not decision.needed:
            return RunReport(updated=False, reason="No updates needed. Current data is up to date.")

        logging.info("Downloading emoji data...")
        emoji_page = fetcher.fetch(self.config.emoji_data_url)
        logging.info("Downloading emoji counts data...")
        counts_page = fetcher.fetch(self.config.emoji_counts_url)

        failures: List[EmojiCatalogError] = []
        report = RunReport(updated=True, reason=decision.reason)

        emoji_html = self._page_text(emoji_page, cfg.RAW_EMOJI_HTML_FILENAME, failures, report)
        if emoji_html is not None:
            try:
                report.catalog = build_emoji_catalog(emoji_html)
            except EmojiCatalogError as e:
                failures.append(e)

        counts_html = self._page_text(counts_page, cfg.RAW_COUNTS_HTML_FILENAME, failures, report)
        if counts_html is not None:
            dual = None
            if report.catalog is not None:
                dual = report.catalog.dual_skin_tone_count
            else:
                logging.warning("Emoji list unavailable, stats will omit dual_skin_tone_support.")
            try:
                report.stats = build_count_stats(counts_html, dual)
            except EmojiCatalogError as e:
                failures.append(e)

        if report.stats is not None:
            # A stamped stats file makes the next run skip the download, so only
            # stamp it when every source made it through.
            if not failures:
                version = decision.latest_version or self._lookup_version(fetcher)
                report.stats = replace(report.stats, emoji_version=version, last_update=self._clock())
            report.written.append(write_stats(self.config, report.stats))
        if report.catalog is not None:
            report.written.extend(write_catalog(self.config, report.catalog))

        if failures:
            for failure in failures:
                logging.error(f"{type(failure).__name__}: {failure}")
            raise failures[0]
        return report

    def _page_text(self, page: FetchResult, raw_filename: str,
                   failures: List[EmojiCatalogError], report: RunReport) -> Optional[str]:
        if not page.ok:
            failures.append(page.error)
            return None
        if self.config.keep_raw_html:
            report.written.append(write_text(self.config.output_path(raw_filename), page.text))
        return page.text

    def _lookup_version(self, fetcher: Fetcher) -> Optional[str]:
        logging.info("Checking for latest emoji version...")
        page = fetcher.fetch(self.config.emoji_version_url)
        if not page.ok:
            logging.warning(f"Could not fetch the emoji version page: {page.error}")
            return None
        try:
            return parse_latest_version(page.text)
        except EmojiCatalogError as e:
            logging.warning(str(e))
            return None
