from .report_model import ReportModel, PLACEHOLDER
from .layout import LayoutCursor, PageStore, Page, Rect, TextRun
from .sections import (
    Header, IdentityBlock, KeyValueBlock, RecordListBlock, RawDumpBlock,
    DEFAULT_SECTIONS, VERBOSE_SECTIONS,
)
from .pdf_generator import DocumentAssembler, RenderFailure, generate_report_pdf
from .delivery import deliver_report

__all__ = [
    "ReportModel", "PLACEHOLDER",
    "LayoutCursor", "PageStore", "Page", "Rect", "TextRun",
    "Header", "IdentityBlock", "KeyValueBlock", "RecordListBlock", "RawDumpBlock",
    "DEFAULT_SECTIONS", "VERBOSE_SECTIONS",
    "DocumentAssembler", "RenderFailure", "generate_report_pdf",
    "deliver_report",
]
