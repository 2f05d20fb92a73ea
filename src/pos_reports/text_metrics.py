"""Font metrics for measuring and wrapping text in layout units."""

from typing import List

from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth


FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"


class TextMeasurer:
    """Measures text with reportlab's standard font metrics.

    Font sizes are always in points; widths are converted to the layout unit
    of the page (``unit`` points per layout unit).
    """

    def __init__(self, unit: float = 1.0):
        self.unit = unit

    def width(self, text: str, font: str = FONT_REGULAR, size: float = 10) -> float:
        return stringWidth(text, font, size) / self.unit

    def wrap(self, text: str, max_width: float, font: str = FONT_REGULAR, size: float = 10) -> List[str]:
        """Split ``text`` into lines no wider than ``max_width`` layout units.

        Always returns at least one line so that empty text still occupies a row.
        """
        lines = simpleSplit(text, font, size, max_width * self.unit)
        return lines or [""]
