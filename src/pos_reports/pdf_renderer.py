"""PDF rendering of laid-out documents using ReportLab."""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .draw_commands import (
    RGB, DrawCommand, FillCommand, ImageCommand, LaidOutDocument, LineCommand, TextCommand,
)


logger = logging.getLogger(__name__)


def _rgb(color: RGB):
    """0-255 RGB triple to ReportLab's 0-1 components."""
    return tuple(component / 255.0 for component in color)


class PDFRenderer:
    """Replays a LaidOutDocument's draw commands onto a ReportLab canvas.

    Layout coordinates run top-down in the geometry's unit; PDF space runs
    bottom-up in points, so every y is flipped against the page height.
    """

    def render(self, document: LaidOutDocument, target: Union[Path, str, BinaryIO]) -> None:
        geo = document.geometry
        self._unit = geo.unit
        self._page_height_pt = geo.page_height * geo.unit
        pagesize = (geo.page_width * geo.unit, self._page_height_pt)

        if isinstance(target, (str, Path)):
            target = str(target)
        c = canvas.Canvas(target, pagesize=pagesize)
        c.setTitle(document.title)

        for page in document.pages:
            for command in page.commands:
                self._draw(c, command)
            c.showPage()

        c.save()
        logger.info("Rendered %s (%d page(s))", document.title, document.page_count)

    def render_bytes(self, document: LaidOutDocument) -> bytes:
        buffer = io.BytesIO()
        self.render(document, buffer)
        return buffer.getvalue()

    def _x(self, x: float) -> float:
        return x * self._unit

    def _y(self, y: float) -> float:
        return self._page_height_pt - y * self._unit

    def _draw(self, c: canvas.Canvas, command: DrawCommand):
        if isinstance(command, TextCommand):
            self._draw_text(c, command)
        elif isinstance(command, FillCommand):
            c.setFillColorRGB(*_rgb(command.color))
            c.rect(
                self._x(command.x),
                self._y(command.y + command.height),
                command.width * self._unit,
                command.height * self._unit,
                fill=1,
                stroke=0,
            )
        elif isinstance(command, LineCommand):
            c.setStrokeColorRGB(*_rgb(command.color))
            c.setLineWidth(command.width * self._unit)
            c.line(self._x(command.x1), self._y(command.y1), self._x(command.x2), self._y(command.y2))
        elif isinstance(command, ImageCommand):
            c.drawImage(
                ImageReader(io.BytesIO(command.data)),
                self._x(command.x),
                self._y(command.y + command.height),
                width=command.width * self._unit,
                height=command.height * self._unit,
                mask="auto",
            )
        else:
            raise TypeError(f"Unsupported draw command: {type(command).__name__}")

    def _draw_text(self, c: canvas.Canvas, command: TextCommand):
        c.setFont(command.font, command.size)
        c.setFillColorRGB(*_rgb(command.color))
        x, y = self._x(command.x), self._y(command.y)
        if command.align == "right":
            c.drawRightString(x, y, command.text)
        elif command.align == "center":
            c.drawCentredString(x, y, command.text)
        else:
            c.drawString(x, y, command.text)
