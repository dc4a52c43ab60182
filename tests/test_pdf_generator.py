"""
Tests for vinreport/services/pdf_generator.py — DocumentAssembler end to end.
"""

import math
import re

import pytest

from vinreport.services.layout import MARGIN, Rect, TextRun
from vinreport.services.pdf_generator import (
    DocumentAssembler, RenderFailure, generate_report_pdf,
)
from vinreport.services.sections import (
    CARD_HEIGHT, NO_ACCIDENTS, NO_SERVICE, RAW_LINE_CHARS, TITLE_HEIGHT, RawDumpBlock,
)

VIN = "1HGCM82633A004352"

_PAGE_RE = re.compile(rb"/Type\s*/Page\b")


def _pdf_pages(data: bytes) -> int:
    return len(_PAGE_RE.findall(data))


def _accidents(n):
    return [{"date": f"2015-01-{(i % 28) + 1:02d}", "description": f"Accident {i}"} for i in range(n)]


@pytest.fixture
def full_payload():
    return {
        "vin": VIN,
        "make": "Honda",
        "model": "Accord",
        "year": 2003,
        "trim": "EX",
        "body": "Sedan",
        "engine": "2.4L I4",
        "ownership": {"totalOwners": 3, "lastOdometer": 187500, "lastState": "Ontario"},
        "accidentRecords": _accidents(3),
        "serviceRecords": [
            {"date": "2018-06-01", "service": "Oil and filter change"},
            {"date": "2019-06-01", "service": "Brake pads replaced"},
        ],
        "providerExtra": {"source": "auction"},
    }


# ---------------------------------------------------------------------------
# Layout scenarios
# ---------------------------------------------------------------------------

class TestLayout:
    def test_empty_report_single_page(self):
        store = DocumentAssembler().layout(
            {"vin": VIN, "accidentRecords": [], "serviceRecords": []}
        )
        assert len(store) == 1
        texts = store[0].texts()
        assert texts.count(NO_ACCIDENTS) == 1
        assert texts.count(NO_SERVICE) == 1
        assert VIN in texts

    @pytest.mark.parametrize("payload", [None, {}, "garbage"])
    def test_missing_payload_still_renders_document(self, payload):
        store = DocumentAssembler().layout(payload)
        texts = store[0].texts()
        assert "N/A" in texts
        assert NO_ACCIDENTS in texts
        assert NO_SERVICE in texts

    def test_section_order(self, full_payload):
        texts = DocumentAssembler().layout(full_payload)[0].texts()
        order = ["Vehicle History Report", "Vehicle Details", "Ownership Summary",
                 "Accident History", "Service History"]
        positions = [texts.index(t) for t in order]
        assert positions == sorted(positions)

    def test_forty_accidents_page_count(self):
        store = DocumentAssembler(sections=[
            s for s in DocumentAssembler().sections
            if getattr(s, "title", None) == "Accident History"
        ]).layout({"accidentRecords": _accidents(40)})
        available = store[0].height - 40 - MARGIN
        block_height = TITLE_HEIGHT + 40 * CARD_HEIGHT
        assert len(store) == math.ceil(block_height / available) == 3

    def test_overflow_moves_content_to_new_page(self, full_payload):
        full_payload["accidentRecords"] = _accidents(40)
        store = DocumentAssembler().layout(full_payload)
        assert len(store) > 1
        all_texts = [t for page in store for t in page.texts()]
        for i in range(40):
            assert f"Accident {i}" in all_texts
        assert "Service History" in all_texts

    def test_no_primitive_below_limit(self, full_payload):
        full_payload["accidentRecords"] = _accidents(60)
        full_payload["serviceRecords"] = [{"date": "d", "service": f"s{i}"} for i in range(60)]
        store = DocumentAssembler(verbose=True).layout(full_payload)
        for page in store:
            limit = page.height - 40
            for prim in page.primitives:
                assert 0 <= prim.y
                assert prim.bottom <= limit

    def test_verbose_appends_raw_dump(self, full_payload):
        plain = DocumentAssembler().layout(full_payload)
        verbose = DocumentAssembler(verbose=True).layout(full_payload)
        assert isinstance(DocumentAssembler(verbose=True).sections[-1], RawDumpBlock)
        verbose_texts = [t for page in verbose for t in page.texts()]
        plain_texts = [t for page in plain for t in page.texts()]
        assert any("providerExtra" in t for t in verbose_texts)
        assert not any("providerExtra" in t for t in plain_texts)

    def test_raw_line_truncated(self):
        store = DocumentAssembler(verbose=True).layout({"vin": VIN, "notes": "y" * 500})
        rows = [p for page in store for p in page.primitives
                if isinstance(p, TextRun) and p.mono and '"notes"' in p.text]
        assert len(rows) == 1
        assert len(rows[0].text) == RAW_LINE_CHARS

    def test_all_pages_closed_after_layout(self, full_payload):
        store = DocumentAssembler().layout(full_payload)
        assert all(page.closed for page in store)

    def test_input_not_mutated(self, full_payload):
        snapshot = repr(full_payload)
        DocumentAssembler(verbose=True).render(full_payload)
        assert repr(full_payload) == snapshot


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

class TestRender:
    def test_produces_pdf(self, full_payload):
        data = DocumentAssembler().render(full_payload)
        assert data.startswith(b"%PDF-")
        assert data.rstrip().endswith(b"%%EOF")

    def test_idempotent_bytes(self, full_payload):
        assembler = DocumentAssembler(verbose=True)
        assert assembler.render(full_payload) == assembler.render(full_payload)

    def test_page_count_in_output(self):
        payload = {"vin": VIN, "accidentRecords": _accidents(40)}
        store = DocumentAssembler().layout(payload)
        data = DocumentAssembler().render(payload)
        assert _pdf_pages(data) == len(store) > 1

    def test_single_page_output(self):
        data = DocumentAssembler().render({"vin": VIN, "accidentRecords": [], "serviceRecords": []})
        assert _pdf_pages(data) == 1

    def test_unencodable_text_raises_render_failure(self):
        with pytest.raises(RenderFailure):
            DocumentAssembler().render({"vin": VIN, "make": "トヨタ"})

    def test_custom_section_list(self):
        calls = []

        def marker(cursor, model):
            calls.append(model.identity)
            page, top = cursor.advance(20)
            page.draw(Rect(MARGIN, top, 10, 10, (0, 0, 0)))

        data = DocumentAssembler(sections=[marker]).render({"vin": VIN})
        assert calls == [VIN]
        assert _pdf_pages(data) == 1


class TestGenerateReportPdf:
    @pytest.mark.asyncio
    async def test_async_wrapper_matches_sync(self, full_payload):
        data = await generate_report_pdf(full_payload)
        assert data == DocumentAssembler().render(full_payload)

    @pytest.mark.asyncio
    async def test_async_wrapper_propagates_failure(self):
        with pytest.raises(RenderFailure):
            await generate_report_pdf({"make": "Škoda Ωmega"})
