"""Section renderers for the vehicle history report.

Each renderer is a callable ``(cursor, model) -> None``. It asks the cursor
for room before drawing, so page breaks happen in one place only
(:meth:`LayoutCursor.advance`). Renderers never raise on missing data: the
model already substituted placeholders.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Callable, Sequence

from .layout import CONTENT_WIDTH, MARGIN, LayoutCursor, Rect, TextRun
from .report_model import AccidentRecord, ReportModel, ServiceRecord


# ── Color palette (black + gold + white/gray) ────────────────────────────────

_BLACK = (22, 22, 22)
_DARK = (50, 50, 50)
_TEXT = (40, 40, 40)
_GRAY = (130, 130, 130)
_WHITE = (255, 255, 255)
_GOLD = (207, 171, 59)
_GREEN = (30, 130, 50)
_CARD_BG = (242, 242, 240)

# ── Row geometry ─────────────────────────────────────────────────────────────

BANNER_HEIGHT = 80.0
TITLE_HEIGHT = 28.0      # includes the gap above the bar
ROW_HEIGHT = 20.0
CARD_HEIGHT = 40.0
RAW_LINE_HEIGHT = 12.0

LABEL_WIDTH = 150.0
RAW_LINE_CHARS = 90

REPORT_TITLE = "Vehicle History Report"
BRAND = "VIN DATA"

NO_ACCIDENTS = "No accident records found"
NO_SERVICE = "No service records found"

Renderer = Callable[[LayoutCursor, ReportModel], None]


# ── Shared drawing helpers ───────────────────────────────────────────────────


def _title_bar(cursor: LayoutCursor, title: str, first_row: float) -> None:
    """Section title; kept on the same page as the first row below it."""
    cursor.keep_together(TITLE_HEIGHT + first_row)
    page, top = cursor.advance(TITLE_HEIGHT)
    bar_top = top + 8
    page.draw(Rect(MARGIN, bar_top, CONTENT_WIDTH, 18, _BLACK))
    page.draw(TextRun(MARGIN + 6, bar_top + 13, title, 10, _WHITE, bold=True))


def _kv_row(cursor: LayoutCursor, label: str, value: str) -> None:
    page, top = cursor.advance(ROW_HEIGHT)
    page.draw(TextRun(MARGIN, top + 14, label, 9, _GRAY, bold=True))
    page.draw(TextRun(MARGIN + LABEL_WIDTH, top + 14, value, 9, _TEXT))


# ── Renderers ────────────────────────────────────────────────────────────────


class Header:
    """Full-width banner on the first page; never paginated."""

    def __call__(self, cursor: LayoutCursor, model: ReportModel) -> None:
        page, _ = cursor.advance(BANNER_HEIGHT)
        width = page.width
        page.draw(Rect(0, 0, width, BANNER_HEIGHT, _BLACK))
        page.draw(Rect(0, BANNER_HEIGHT, width, 2, _GOLD))
        page.draw(TextRun(MARGIN, 26, BRAND, 9, _GOLD, bold=True))
        page.draw(TextRun(MARGIN, 50, REPORT_TITLE, 18, _WHITE, bold=True))
        page.draw(TextRun(MARGIN, 68, f"VIN: {model.identity}", 9, (150, 150, 150)))


class IdentityBlock:
    def __call__(self, cursor: LayoutCursor, model: ReportModel) -> None:
        _kv_row(cursor, "Vehicle identifier (VIN):", model.identity)


class KeyValueBlock:
    """Title plus one label/value row per configured key, in key order."""

    def __init__(
        self,
        title: str,
        rows: Callable[[ReportModel], Sequence[tuple[str, str]]],
    ) -> None:
        self.title = title
        self.rows = rows

    def __call__(self, cursor: LayoutCursor, model: ReportModel) -> None:
        _title_bar(cursor, self.title, ROW_HEIGHT)
        for label, value in self.rows(model):
            _kv_row(cursor, f"{label}:", value)


class RecordListBlock:
    """Title plus one row or card per record.

    ``to_lines`` maps a record to its text lines; the first line is drawn
    bold. With ``card=True`` each record gets a shaded fixed-height card,
    otherwise a plain row showing the first line only. An empty sequence
    renders a single ``empty_message`` row in green.
    """

    def __init__(
        self,
        title: str,
        records: Callable[[ReportModel], Sequence],
        to_lines: Callable[[object], Sequence[str]],
        empty_message: str,
        card: bool = True,
    ) -> None:
        self.title = title
        self.records = records
        self.to_lines = to_lines
        self.empty_message = empty_message
        self.card = card

    @property
    def row_height(self) -> float:
        return CARD_HEIGHT if self.card else ROW_HEIGHT

    def __call__(self, cursor: LayoutCursor, model: ReportModel) -> None:
        records = self.records(model)
        if not records:
            _title_bar(cursor, self.title, ROW_HEIGHT)
            page, top = cursor.advance(ROW_HEIGHT)
            page.draw(TextRun(MARGIN, top + 14, self.empty_message, 9, _GREEN, bold=True))
            return

        _title_bar(cursor, self.title, self.row_height)
        for record in records:
            lines = list(self.to_lines(record)) or [""]
            page, top = cursor.advance(self.row_height)
            if not self.card:
                page.draw(TextRun(MARGIN, top + 14, lines[0], 9, _TEXT))
                continue
            page.draw(Rect(MARGIN, top + 2, CONTENT_WIDTH, CARD_HEIGHT - 4, _CARD_BG))
            page.draw(Rect(MARGIN, top + 2, 3, CARD_HEIGHT - 4, _GOLD))
            page.draw(TextRun(MARGIN + 10, top + 16, lines[0], 9, _BLACK, bold=True))
            if len(lines) > 1:
                page.draw(TextRun(MARGIN + 10, top + 30, lines[1], 8.5, _DARK))


def _json_ready(value: object) -> object:
    """Copy of ``value`` with every mapping key stringified, so keys sort."""
    if isinstance(value, Mapping):
        return {str(k): _json_ready(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(v) for v in value]
    return value


class RawDumpBlock:
    """Full payload as indented JSON, one truncated line per row."""

    title = "Raw Report Data"

    def __init__(self, max_chars: int = RAW_LINE_CHARS) -> None:
        self.max_chars = max_chars

    def lines(self, raw: object) -> list[str]:
        dump = json.dumps(_json_ready(raw), indent=2, sort_keys=True, default=str, ensure_ascii=True)
        return [ln[: self.max_chars] for ln in dump.splitlines()]

    def __call__(self, cursor: LayoutCursor, model: ReportModel) -> None:
        _title_bar(cursor, self.title, RAW_LINE_HEIGHT)
        for line in self.lines(model.raw):
            page, top = cursor.advance(RAW_LINE_HEIGHT)
            page.draw(TextRun(MARGIN, top + 9, line, 8, _DARK, mono=True))


# ── Record formatting ────────────────────────────────────────────────────────


def _ownership_line(row: tuple[str, str]) -> tuple[str]:
    label, value = row
    return (f"{label}: {value}",)


def _accident_lines(rec: AccidentRecord) -> tuple[str, str]:
    return (rec.date, rec.description)


def _service_lines(rec: ServiceRecord) -> tuple[str, str]:
    return (rec.date, rec.service)


# ── Section order ────────────────────────────────────────────────────────────

DEFAULT_SECTIONS: tuple[Renderer, ...] = (
    Header(),
    IdentityBlock(),
    KeyValueBlock("Vehicle Details", lambda m: m.attributes),
    RecordListBlock(
        "Ownership Summary", lambda m: m.ownership, _ownership_line,
        empty_message="No ownership data", card=False,
    ),
    RecordListBlock("Accident History", lambda m: m.accidents, _accident_lines, NO_ACCIDENTS),
    RecordListBlock("Service History", lambda m: m.services, _service_lines, NO_SERVICE),
)

VERBOSE_SECTIONS: tuple[Renderer, ...] = DEFAULT_SECTIONS + (RawDumpBlock(),)
