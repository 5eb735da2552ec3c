import json
import tempfile
import unittest
from unittest import mock
from pathlib import Path

import httpx

from emoji_catalog import cli
from emoji_catalog.config import CatalogConfig
from emoji_catalog.errors import DataIntegrityError, FatalFetchError, MalformedRowError, SelfTestFailure
from emoji_catalog.pipeline import EmojiCatalogGenerator, RunReport, build_catalog
from emoji_catalog.selftest import (
    MOCK_COUNTS_HTML,
    MOCK_COUNTS_WITHOUT_TOTAL_HTML,
    MOCK_EMOJI_DATA_HTML,
    check_fixture_results,
    run_self_test,
)
from emoji_catalog.storage import write_json

VERSION_HTML = "<html><body><h2>Emoji 16.0</h2></body></html>"
BROKEN_EMOJI_DATA_HTML = """
<table>
  <tr><td class="code">1F600</td><td class="name">grinning face</td><td class="group">Smileys &amp; Emotion</td></tr>
  <tr><td class="code">XYZ</td><td class="name">broken</td><td class="group">Smileys &amp; Emotion</td></tr>
</table>
"""
CATALOG_FILES = [
    "data-by-emoji.json",
    "data-by-group.json",
    "data-ordered-emoji.json",
    "data-emoji-components.json",
]


class TestSelfTest(unittest.TestCase):

    def test_fixtures_pass(self):
        catalog, stats = run_self_test()
        self.assertEqual(stats.total_without_skin_tone_variations, 275)
        self.assertEqual(len(catalog.records), 44)

    def test_mismatches_are_reported(self):
        catalog, stats = build_catalog(MOCK_EMOJI_DATA_HTML, MOCK_COUNTS_HTML)
        del catalog.records["\U0001F91D"]
        failures = check_fixture_results(catalog, stats)
        self.assertTrue(any("handshake" in f for f in failures))
        self.assertEqual(str(SelfTestFailure(failures)).count(";"), len(failures) - 1)


class TestEmojiCatalogGenerator(unittest.TestCase):

    def setUp(self):
        self._tmp_dir = tempfile.TemporaryDirectory(prefix="test_emoji_catalog_")
        self.addCleanup(self._tmp_dir.cleanup)
        self.root = Path(self._tmp_dir.name)
        self.config = CatalogConfig(output_root=self.root, auto_update=False, max_retries=1, retry_delay=0)
        self.pages = {
            self.config.emoji_data_url: (200, MOCK_EMOJI_DATA_HTML),
            self.config.emoji_counts_url: (200, MOCK_COUNTS_HTML),
            self.config.emoji_version_url: (200, VERSION_HTML),
        }
        self.requested = []

    def handler(self, request):
        url = str(request.url)
        self.requested.append(url)
        status, text = self.pages.get(url, (404, "not found"))
        return httpx.Response(status, text=text)

    def generator(self, config=None):
        client = httpx.Client(transport=httpx.MockTransport(self.handler))
        self.addCleanup(client.close)
        return EmojiCatalogGenerator(config or self.config, client=client, sleep=lambda s: None,
                                     clock=lambda: 1700000000000)

    def load(self, name):
        return json.loads((self.root / name).read_text(encoding="utf-8"))

    def test_full_run_writes_every_artifact(self):
        report = self.generator().run()
        self.assertTrue(report.updated)

        by_emoji = self.load("data-by-emoji.json")
        self.assertEqual(len(by_emoji), 44)
        self.assertEqual(by_emoji["\U0001F600"], {
            "name": "grinning face",
            "group": "Smileys & Emotion",
            "skin_tone_support": False,
            "dual_skin_tone_support": False,
            "is_variant": False,
            "base_emoji": None,
            "code_points": [0x1F600],
        })
        self.assertEqual(by_emoji["\U0001F91D\U0001F3FB"]["base_emoji"], "\U0001F91D")

        groups = self.load("data-by-group.json")
        self.assertEqual([g["name"] for g in groups], ["Smileys & Emotion", "People & Body"])

        ordered = self.load("data-ordered-emoji.json")
        self.assertEqual(ordered, sorted(by_emoji))
        self.assertEqual(self.load("data-emoji-components.json"), {})

        stats = self.load("test/stats.json")
        self.assertEqual(stats["total_without_skin_tone_variations"], 275)
        self.assertEqual(stats["emoji_version"], "16.0")
        self.assertEqual(stats["last_update"], 1700000000000)

        self.assertTrue((self.root / "emoji-data.html").exists())
        self.assertTrue((self.root / "emoji-counts.html").exists())
        self.assertEqual(len(report.written), 7)

    def test_missing_total_writes_no_stats(self):
        self.pages[self.config.emoji_counts_url] = (200, MOCK_COUNTS_WITHOUT_TOTAL_HTML)
        with self.assertRaises(DataIntegrityError):
            self.generator().run()
        self.assertFalse((self.root / "test" / "stats.json").exists())
        for name in CATALOG_FILES:
            self.assertTrue((self.root / name).exists(), name)

    def test_failed_source_still_persists_the_other(self):
        del self.pages[self.config.emoji_data_url]
        with self.assertRaises(FatalFetchError):
            self.generator().run()
        self.assertEqual(self.requested.count(self.config.emoji_data_url), 2)
        for name in CATALOG_FILES:
            self.assertFalse((self.root / name).exists(), name)
        stats = self.load("test/stats.json")
        self.assertEqual(stats["total_without_skin_tone_variations"], 275)
        self.assertNotIn("last_update", stats)
        self.assertNotIn("emoji_version", stats)
        self.assertNotIn("dual_skin_tone_support", stats)

    def test_malformed_emoji_row_keeps_only_the_counts(self):
        self.pages[self.config.emoji_data_url] = (200, BROKEN_EMOJI_DATA_HTML)
        with self.assertRaises(MalformedRowError):
            self.generator().run()
        for name in CATALOG_FILES:
            self.assertFalse((self.root / name).exists(), name)
        stats = self.load("test/stats.json")
        self.assertEqual(stats["total_without_skin_tone_variations"], 275)
        self.assertNotIn("dual_skin_tone_support", stats)

    def test_up_to_date_catalog_is_left_alone(self):
        config = CatalogConfig(output_root=self.root, auto_update=True, keep_raw_html=False)
        write_json(config.stats_path, {"last_update": 1700000000000 - 1000, "emoji_version": "16.0"})
        report = self.generator(config).run()
        self.assertFalse(report.updated)
        self.assertEqual(self.requested, [])

        report = self.generator(config).run(force=True)
        self.assertTrue(report.updated)
        self.assertFalse((self.root / "emoji-data.html").exists())

    def test_missing_version_page_is_not_fatal(self):
        del self.pages[self.config.emoji_version_url]
        report = self.generator().run()
        self.assertIsNone(report.stats.emoji_version)
        self.assertNotIn("emoji_version", self.load("test/stats.json"))


class TestCli(unittest.TestCase):

    def test_selftest_command(self):
        self.assertEqual(cli.main(["selftest"]), 0)
        self.assertEqual(cli.main(["--test"]), 0)

    def test_config_from_flags(self):
        args = cli.parse_args(["generate", "--root", "/tmp/out", "--retries", "5", "--no-raw-html"])
        config = cli.build_config(args)
        self.assertEqual(config.output_root, Path("/tmp/out"))
        self.assertEqual(config.max_retries, 5)
        self.assertFalse(config.keep_raw_html)

    def test_generate_exit_codes(self):
        config = CatalogConfig(auto_update=False)
        with mock.patch.object(EmojiCatalogGenerator, "run", return_value=RunReport(updated=False)):
            self.assertEqual(cli.run_generate(config), 0)
        with mock.patch.object(EmojiCatalogGenerator, "run",
                               side_effect=FatalFetchError("https://unicode.org", "Giving up", attempts=4)):
            with self.assertLogs(level="ERROR"):
                self.assertEqual(cli.run_generate(config), 1)
        with mock.patch.object(EmojiCatalogGenerator, "run", side_effect=RuntimeError("boom")):
            with self.assertLogs(level="ERROR"):
                self.assertEqual(cli.run_generate(config), 1)

    def test_generate_with_malformed_page_exits_nonzero(self):
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.object(EmojiCatalogGenerator, "run",
                                   side_effect=MalformedRowError("XYZ", "not hex", "broken")):
                self.assertEqual(cli.main(["generate", "--root", tmp]), 1)

    def test_failed_self_test_exits_nonzero(self):
        with mock.patch.object(cli, "run_self_test", side_effect=SelfTestFailure(["group order is wrong"])):
            self.assertEqual(cli.main(["selftest"]), 1)
            self.assertEqual(cli.main(["--test"]), 1)

    def test_invalid_flags_exit_nonzero(self):
        self.assertEqual(cli.main(["generate", "--timeout", "0"]), 1)


if __name__ == '__main__':
    unittest.main()
