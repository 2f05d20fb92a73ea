"""Draw commands emitted by the layout engine and the paginated document holding them."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple, Union

from .totals import RunningTotals, Summary

if TYPE_CHECKING:
    from .layout_engine import PageGeometry


RGB = Tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
FOOTER_GRAY: RGB = (100, 100, 100)


# All coordinates are in layout units measured from the top-left corner of the
# page; the renderer converts them to PDF space.

@dataclass(frozen=True)
class TextCommand:
    """Place a single line of text with its baseline at ``y``."""
    text: str
    x: float
    y: float
    font: str = "Helvetica"
    size: float = 10
    align: str = "left"  # "left", "center", "right"
    color: RGB = BLACK
    role: str = "row"


@dataclass(frozen=True)
class FillCommand:
    """Fill a rectangle whose top-left corner is ``(x, y)``."""
    x: float
    y: float
    width: float
    height: float
    color: RGB
    role: str = "zebra"


@dataclass(frozen=True)
class LineCommand:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.5
    color: RGB = BLACK
    role: str = "rule"


@dataclass(frozen=True)
class ImageCommand:
    """Draw encoded image bytes (PNG/JPEG) into the given box."""
    data: bytes
    x: float
    y: float
    width: float
    height: float
    role: str = "header"


DrawCommand = Union[TextCommand, FillCommand, LineCommand, ImageCommand]


@dataclass
class Page:
    """Commands for one page, in drawing order."""
    index: int
    commands: List[DrawCommand] = field(default_factory=list)

    def texts(self, role: Optional[str] = None) -> List[TextCommand]:
        return [
            cmd for cmd in self.commands
            if isinstance(cmd, TextCommand) and (role is None or cmd.role == role)
        ]

    def with_role(self, role: str) -> List[DrawCommand]:
        return [cmd for cmd in self.commands if cmd.role == role]


@dataclass
class RowPlacement:
    """Where a data row ended up."""
    row_index: int
    page_index: int
    y_top: float
    height: float

    @property
    def y_bottom(self) -> float:
        return self.y_top + self.height


@dataclass
class LaidOutDocument:
    """
    A finished multi-page document as an ordered list of draw commands.

    The geometry travels with the pages so any renderer can replay them.
    """
    title: str
    geometry: "PageGeometry"
    pages: List[Page]
    row_placements: List[RowPlacement] = field(default_factory=list)
    totals: Optional[RunningTotals] = None
    summary: Optional[Summary] = None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, index: int) -> Page:
        return self.pages[index]

    def select_pages(self, indices: Iterable[int]) -> "LaidOutDocument":
        """
        Return a new document containing only the given zero-based pages, in
        the given order. Page indices are renumbered; footers are left as
        stamped on the full document.
        """
        selected: List[Page] = []
        for new_index, old_index in enumerate(indices):
            if old_index < 0 or old_index >= len(self.pages):
                raise IndexError(f"page {old_index} out of range (document has {len(self.pages)})")
            selected.append(Page(index=new_index, commands=list(self.pages[old_index].commands)))
        return replace(self, pages=selected, row_placements=[])

    def to_pdf_bytes(self) -> bytes:
        from .pdf_renderer import PDFRenderer

        return PDFRenderer().render_bytes(self)

    def save(self, path: Path) -> Path:
        from .pdf_renderer import PDFRenderer

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        PDFRenderer().render(self, path)
        return path

