"""PDF Report Generator for vehicle history reports.

Layout runs on an in-memory :class:`PageStore` first; the finished pages are
then replayed onto an fpdf2 document. Core PDF fonts (Helvetica / Courier)
are used, so no font files need to be installed.

Installation:
    pip install fpdf2
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from fpdf import FPDF
from fpdf.errors import FPDFException

from .layout import (
    BOTTOM_MARGIN, MARGIN, PAGE_HEIGHT, PAGE_WIDTH,
    LayoutCursor, PageStore, Rect, TextRun,
)
from .report_model import ReportModel
from .sections import DEFAULT_SECTIONS, VERBOSE_SECTIONS, Renderer

logger = logging.getLogger(__name__)

# Fixed document date: identical input must give identical bytes.
_DOC_DATE = datetime(2000, 1, 1, tzinfo=timezone.utc)


class RenderFailure(Exception):
    """The laid-out document could not be serialized."""
    pass


# ── Serialization ────────────────────────────────────────────────────────────


def _serialize(store: PageStore, title: str = "Vehicle History Report") -> bytes:
    """Replay every page's primitives onto an fpdf2 document."""
    pdf = FPDF("P", "pt", (store.width, store.height))
    pdf.set_creation_date(_DOC_DATE)
    pdf.set_title(title)
    pdf.set_auto_page_break(False)
    pdf.set_margins(MARGIN, MARGIN, MARGIN)

    for page in store:
        pdf.add_page()
        for prim in page.primitives:
            if isinstance(prim, Rect):
                pdf.set_fill_color(*prim.color)
                pdf.rect(prim.x, prim.y, prim.w, prim.h, "F")
            elif isinstance(prim, TextRun):
                family = "Courier" if prim.mono else "Helvetica"
                pdf.set_font(family, "B" if prim.bold else "", prim.size)
                pdf.set_text_color(*prim.color)
                pdf.text(prim.x, prim.y, prim.text)
    return bytes(pdf.output())


# ── Assembler ────────────────────────────────────────────────────────────────


class DocumentAssembler:
    """Runs the section renderers in order and produces the final PDF.

    Every call builds its own model, store and cursor; an assembler
    instance holds configuration only and is safe to share.
    """

    def __init__(
        self,
        sections: Optional[Sequence[Renderer]] = None,
        verbose: bool = False,
        page_width: float = PAGE_WIDTH,
        page_height: float = PAGE_HEIGHT,
    ) -> None:
        if sections is None:
            sections = VERBOSE_SECTIONS if verbose else DEFAULT_SECTIONS
        self.sections = tuple(sections)
        self.page_width = page_width
        self.page_height = page_height

    def layout(self, payload: Any) -> PageStore:
        model = ReportModel.from_payload(payload)
        store = PageStore(self.page_width, self.page_height)
        store.new_page()
        cursor = LayoutCursor(store, top_margin=MARGIN, bottom_margin=BOTTOM_MARGIN)
        for section in self.sections:
            section(cursor, model)
        store.current.closed = True
        logger.debug(f"Laid out report for {model.identity}: {len(store)} page(s)")
        return store

    def render(self, payload: Any) -> bytes:
        store = self.layout(payload)
        try:
            data = _serialize(store)
        except (FPDFException, UnicodeError) as e:
            logger.error(f"PDF serialization failed: {e}")
            raise RenderFailure(str(e)) from e
        logger.info(f"Rendered report: {len(store)} page(s), {len(data)} bytes")
        return data


# ── Public interface ─────────────────────────────────────────────────────────


def _build(payload: Any, verbose: bool = False) -> bytes:
    """Synchronous PDF generation — called via asyncio.to_thread."""
    return DocumentAssembler(verbose=verbose).render(payload)


async def generate_report_pdf(payload: Any, verbose: bool = False) -> bytes:
    """
    Render a vehicle history payload into PDF bytes.

    Args:
        payload: provider response (nested dict); None / {} give a
            placeholder-filled report.
        verbose: append the raw payload dump after the regular sections.

    Returns:
        bytes — the finished PDF.

    Raises:
        RenderFailure: the document could not be serialized.
    """
    return await asyncio.to_thread(_build, payload, verbose)
