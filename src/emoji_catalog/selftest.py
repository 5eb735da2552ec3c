#selftest.py
# Offline check of the parse/build pipeline against fixed fixtures.
import logging
from typing import List, Tuple

from .errors import DataIntegrityError, SelfTestFailure
from .models import CountStats, SkinToneModifier
from .pipeline import EmojiCatalog, build_catalog, build_count_stats

MOCK_EMOJI_DATA_HTML = """
<table>
  <tr class="r0">
    <td class="code">1F600</td>
    <td class="name">grinning face</td>
    <td class="group">Smileys &amp; Emotion</td>
  </tr>
  <tr class="r1">
    <td class="code">1F91D</td>
    <td class="name">handshake</td>
    <td class="group">People &amp; Body</td>
  </tr>
  <tr class="r2">
    <td class="code">1F44B</td>
    <td class="name">waving hand</td>
    <td class="group">People &amp; Body</td>
  </tr>
  <tr class="r3">
    <td class="code">1F46B</td>
    <td class="name">woman and man holding hands</td>
    <td class="group">People &amp; Body</td>
  </tr>
</table>
"""

MOCK_COUNTS_HTML = """
<table>
  <tr><td>Group</td><td>Count</td></tr>
  <tr><td>Smileys &amp; Emotion</td><td>100</td></tr>
  <tr><td>People &amp; Body</td><td>200</td></tr>
  <tr><td>Component</td><td>10</td></tr>
  <tr><td>Total</td><td>310</td></tr>
  <tr><td>With skin tone variations</td><td>25</td></tr>
</table>
"""

MOCK_COUNTS_WITHOUT_TOTAL_HTML = """
<table>
  <tr><td>Group</td><td>Count</td></tr>
  <tr><td>People &amp; Body</td><td>200</td></tr>
  <tr><td>Component</td><td>10</td></tr>
  <tr><td>With skin tone variations</td><td>25</td></tr>
</table>
"""

GRINNING_FACE = "\U0001F600"
HANDSHAKE = "\U0001F91D"
WAVING_HAND = "\U0001F44B"


def _check(failures: List[str], condition: bool, description: str) -> None:
    if not condition:
        failures.append(description)


def _variants_of(catalog: EmojiCatalog, base: str) -> List[str]:
    return [k for k, r in catalog.records.items() if r.is_variant and r.base_emoji == base]


def check_fixture_results(catalog: EmojiCatalog, stats: CountStats) -> List[str]:
    """Returns a description of every expectation the fixture results miss."""
    failures: List[str] = []

    _check(failures, stats.total_without_skin_tone_variations == 275,
           f"total_without_skin_tone_variations is {stats.total_without_skin_tone_variations}, expected 275")
    _check(failures, stats.component == 10, f"component is {stats.component}, expected 10")
    _check(failures, stats.groups == {"Smileys & Emotion": 100, "People & Body": 200},
           f"groups are {stats.groups}")
    _check(failures, stats.dual_skin_tone_support == 1,
           f"dual_skin_tone_support is {stats.dual_skin_tone_support}, expected 1")

    grinning = catalog.records.get(GRINNING_FACE)
    _check(failures, grinning is not None and not grinning.skin_tone_support
           and not grinning.dual_skin_tone_support, "grinning face should have no skin tone support")
    _check(failures, not _variants_of(catalog, GRINNING_FACE), "grinning face should have no variants")

    handshake = catalog.records.get(HANDSHAKE)
    _check(failures, handshake is not None and handshake.skin_tone_support
           and handshake.dual_skin_tone_support, "handshake should support one and two skin tones")
    handshake_variants = [catalog.records[k] for k in _variants_of(catalog, HANDSHAKE)]
    _check(failures, sum(len(v.code_points) == 2 for v in handshake_variants) == 5,
           "handshake should have 5 single skin tone variants")
    _check(failures, sum(len(v.code_points) == 3 for v in handshake_variants) == 25,
           "handshake should have 25 dual skin tone variants")
    light_dark = HANDSHAKE + SkinToneModifier.LIGHT.char + SkinToneModifier.DARK.char
    _check(failures, light_dark in catalog.records
           and catalog.records[light_dark].name == "handshake (light skin tone and dark skin tone)",
           "missing 'handshake (light skin tone and dark skin tone)'")

    _check(failures, len(_variants_of(catalog, WAVING_HAND)) == 5, "waving hand should have 5 variants")
    _check(failures, len(catalog.records) == 44, f"{len(catalog.records)} emoji entries, expected 44")

    _check(failures, [g.name for g in catalog.groups] == ["Smileys & Emotion", "People & Body"],
           f"group order is {[g.name for g in catalog.groups]}")
    _check(failures, [len(g.emojis) for g in catalog.groups] == [1, 3],
           f"group sizes are {[len(g.emojis) for g in catalog.groups]}, expected [1, 3]")
    _check(failures, catalog.ordered == sorted(catalog.ordered) and len(catalog.ordered) == len(catalog.records),
           "ordered emoji list is not the sorted key list")
    _check(failures, catalog.components == {}, "fixture has no Component emojis")
    return failures


def run_self_test() -> Tuple[EmojiCatalog, CountStats]:
    """
    Runs the parse/build pipeline on the inline fixtures and checks the results.

    Raises:
        SelfTestFailure: listing every expectation that was not met.
    """
    logging.info("Running tests with mock data...")
    catalog, stats = build_catalog(MOCK_EMOJI_DATA_HTML, MOCK_COUNTS_HTML)
    failures = check_fixture_results(catalog, stats)

    try:
        build_count_stats(MOCK_COUNTS_WITHOUT_TOTAL_HTML)
        failures.append("counts without a 'Total' row were accepted")
    except DataIntegrityError:
        pass

    if failures:
        for failure in failures:
            logging.error(f"Failed assertion: {failure}")
        raise SelfTestFailure(failures)
    logging.info("All tests passed!")
    return catalog, stats
