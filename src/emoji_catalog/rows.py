#rows.py
from typing import Iterator

from bs4 import BeautifulSoup

from .models import CountRow, EmojiRow


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def extract_emoji_rows(html: str) -> Iterator[EmojiRow]:
    """
    Yields the rows of the full emoji list that carry a `code`, a `name` and a
    `group` cell. Header and separator rows have no such cells and are skipped.
    """
    for tr in _soup(html).find_all("tr"):
        code_cell = tr.find(class_="code")
        name_cell = tr.find(class_="name")
        group_cell = tr.find(class_="group")
        if code_cell is None or name_cell is None or group_cell is None:
            continue
        yield EmojiRow(
            code=code_cell.get_text(" ", strip=True),
            name=name_cell.get_text(strip=True),
            group=group_cell.get_text(strip=True),
        )


def extract_count_rows(html: str) -> Iterator[CountRow]:
    """
    Yields (label, count) pairs taken from the first two cells of every table row.

    Header rows built from <th> cells are yielded too so the reconciler sees the
    header in first position whichever cell type the page uses.
    """
    for tr in _soup(html).find_all("tr"):
        cells = tr.find_all(["td", "th"])
        if len(cells) < 2:
            continue
        yield CountRow(label=cells[0].get_text(strip=True), count=cells[1].get_text(strip=True))
