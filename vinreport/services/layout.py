"""Page surfaces and the vertical writing cursor.

Everything is measured in layout units (PDF points) with the origin in the
top-left corner of the page and ``y`` growing downwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Union

logger = logging.getLogger(__name__)

# ── Page geometry ─────────────────────────────────────────────────────────────

PAGE_WIDTH = 620.0
PAGE_HEIGHT = 820.0
MARGIN = 20.0            # top / left / right
BOTTOM_MARGIN = 40.0     # overflow threshold measured from the bottom edge

CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

Color = tuple[int, int, int]


# ── Draw primitives ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float
    color: Color

    @property
    def bottom(self) -> float:
        return self.y + self.h


@dataclass(frozen=True)
class TextRun:
    """Single line of text; ``y`` is the baseline."""

    x: float
    y: float
    text: str
    size: float
    color: Color
    bold: bool = False
    mono: bool = False

    @property
    def bottom(self) -> float:
        return self.y


Primitive = Union[Rect, TextRun]


# ── Pages ─────────────────────────────────────────────────────────────────────


@dataclass
class Page:
    index: int
    width: float = PAGE_WIDTH
    height: float = PAGE_HEIGHT
    primitives: list[Primitive] = field(default_factory=list)
    closed: bool = False

    def draw(self, primitive: Primitive) -> None:
        if self.closed:
            raise RuntimeError(f"page {self.index} is finalized")
        self.primitives.append(primitive)

    def texts(self) -> list[str]:
        return [p.text for p in self.primitives if isinstance(p, TextRun)]


class PageStore:
    """Append-only sequence of pages; only the last one accepts primitives."""

    def __init__(self, width: float = PAGE_WIDTH, height: float = PAGE_HEIGHT) -> None:
        self.width = width
        self.height = height
        self._pages: list[Page] = []

    def new_page(self) -> Page:
        if self._pages:
            self._pages[-1].closed = True
        page = Page(len(self._pages), self.width, self.height)
        self._pages.append(page)
        return page

    @property
    def current(self) -> Page:
        if not self._pages:
            raise RuntimeError("no page has been opened yet")
        return self._pages[-1]

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages)

    def __getitem__(self, index: int) -> Page:
        return self._pages[index]


# ── Cursor ────────────────────────────────────────────────────────────────────


class LayoutCursor:
    """Tracks the writing position and owns every page break.

    ``advance`` is the only place that compares against the overflow limit
    and asks the store for a new page.
    """

    def __init__(
        self,
        store: PageStore,
        top_margin: float = MARGIN,
        bottom_margin: float = BOTTOM_MARGIN,
    ) -> None:
        self.store = store
        self.top_margin = top_margin
        self.bottom_margin = bottom_margin
        if not len(store):
            store.new_page()
        self.page_index = len(store) - 1
        self.y = top_margin

    @property
    def page_height(self) -> float:
        return self.store.height

    @property
    def limit(self) -> float:
        """Lowest ``y`` any content may reach on a page."""
        return self.page_height - self.bottom_margin

    @property
    def available(self) -> float:
        """Usable height of an empty page."""
        return self.limit - self.top_margin

    def current_page(self) -> Page:
        return self.store.current

    def _break_page(self) -> Page:
        page = self.store.new_page()
        self.page_index = page.index
        self.y = self.top_margin
        logger.debug(f"Page break -> page {page.index + 1}")
        return page

    def advance(self, row_height: float) -> tuple[Page, float]:
        """Reserve ``row_height`` below the cursor.

        When the row would cross the overflow limit a fresh page is opened
        before anything is drawn. Returns the page to draw on and the top
        offset of the reserved row; the cursor ends up below the row.
        """
        if row_height < 0:
            raise ValueError("row height must be non-negative")
        if row_height > self.available:
            raise ValueError(
                f"row of {row_height} units does not fit on an empty page "
                f"({self.available} available)"
            )
        if self.y + row_height > self.limit:
            self._break_page()
        top = self.y
        self.y += row_height
        return self.current_page(), top

    def keep_together(self, height: float) -> Page:
        """Break before a block of ``height`` unless it fits on this page."""
        height = min(height, self.available)
        if self.y + height > self.limit:
            return self._break_page()
        return self.current_page()
