"""Layout engine turning report rows into paginated draw commands."""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from .draw_commands import (
    FOOTER_GRAY, FillCommand, ImageCommand, LaidOutDocument, LineCommand,
    Page, RowPlacement, TextCommand, DrawCommand,
)
from .formatting import format_date
from .text_metrics import FONT_BOLD, FONT_ITALIC, FONT_REGULAR, TextMeasurer
from .totals import RunningTotals, Summary

if TYPE_CHECKING:
    from .report_templates import ReportTemplate


logger = logging.getLogger(__name__)


class SummaryStyle(Enum):
    """How the closing summary block is drawn."""
    PANEL = "panel"  # tinted title band + two-column field grid
    LEDGER = "ledger"  # right-aligned totals lines (receipts)


@dataclass
class PageGeometry:
    """
    Page size and vertical policy for a document type.

    Layout units grow downward from the top-left corner; ``unit`` is the
    number of PDF points per layout unit.
    """
    page_width: float = 210.0
    page_height: float = 297.0
    margin: float = 15.0
    top_margin: float = 20.0
    page_break_threshold: float = 276.0  # a row must end at or above this
    summary_limit: float = 280.0  # footer starts here
    summary_top: float = 30.0  # resume point when the summary moves to a new page
    footer_y: float = 285.0
    footer_leading: float = 4.0
    unit: float = mm

    @classmethod
    def a4_millimetres(cls) -> "PageGeometry":
        """A4 portrait in millimetres, used by the tabular reports."""
        return cls()

    @classmethod
    def a4_points(cls) -> "PageGeometry":
        """A4 portrait in points with 40pt margins, used by receipts."""
        return cls(
            page_width=A4[0],
            page_height=A4[1],
            margin=40.0,
            top_margin=40.0,
            page_break_threshold=775.0,
            summary_limit=800.0,
            summary_top=40.0,
            footer_y=825.0,
            footer_leading=9.0,
            unit=1.0,
        )

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def center_x(self) -> float:
        return self.page_width / 2

    @property
    def right_edge(self) -> float:
        return self.page_width - self.margin


@dataclass
class Cursor:
    """Current vertical position and page. ``y`` never moves up within a page."""
    y: float
    page_index: int = 0

    def advance(self, dy: float) -> float:
        if dy < 0:
            raise ValueError(f"cursor cannot move up within a page (dy={dy})")
        self.y += dy
        return self.y

    def move_to(self, y: float) -> float:
        return self.advance(y - self.y)

    def new_page(self, top: float) -> int:
        self.page_index += 1
        self.y = top
        return self.page_index


@dataclass
class HeaderLine:
    """A centred line of the first-page document header."""
    text: str
    font: str = FONT_REGULAR
    size: float = 10
    advance: float = 10


@dataclass
class InfoBlock:
    """Two label/value panels printed under the header (receipt order details)."""
    left: List[Tuple[str, str]] = field(default_factory=list)
    right: List[Tuple[str, str]] = field(default_factory=list)
    left_value_offset: float = 70
    right_value_offset: float = 80
    line_height: float = 12
    font_size: float = 10
    gap_after: float = 20


@dataclass
class DocumentMeta:
    """Per-document header/footer metadata."""
    title: str
    header_lines: List[HeaderLine]
    generated_by: str
    generated_on: date = field(default_factory=date.today)
    info: Optional[InfoBlock] = None


class LayoutEngine:
    """Single forward pass over rows, producing pages of draw commands.

    The engine has two states: drawing within a page, and the page-break
    transition. A transition happens only when the next row (or the closing
    blocks) would not fit above the page's threshold.
    """

    def __init__(self, template: "ReportTemplate", measurer: Optional[TextMeasurer] = None):
        self.template = template
        self.geometry = template.geometry
        self.measurer = measurer or TextMeasurer(self.geometry.unit)
        self.reset()

    def reset(self):
        """Fresh cursor, pages and totals for a new document."""
        self.cursor = Cursor(y=self.geometry.top_margin)
        self.pages: List[Page] = [Page(index=0)]
        self.totals = RunningTotals()
        self.placements: List[RowPlacement] = []

    def render(
        self,
        rows: Iterable[Mapping[str, Any]],
        meta: DocumentMeta,
        logo: Optional[bytes] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> LaidOutDocument:
        """Lay out a complete document.

        Args:
            rows: Row records in display order, keyed by column key
            meta: Header/footer metadata
            logo: Encoded logo image, or None to omit it
            context: Precomputed aggregates passed through to the summary

        Returns:
            LaidOutDocument with one Page per produced page
        """
        self.reset()
        template = self.template

        self._draw_document_header(meta, logo)
        if meta.info is not None:
            self._draw_info_block(meta.info)
        self._draw_column_header()

        for index, row in enumerate(rows):
            self._draw_row(index, row)
            template.accumulate(self.totals, row)

        self.totals.close()
        summary = template.summarize(self.totals, context or {})

        self._draw_closing_rule(summary)
        if template.summary_style is SummaryStyle.LEDGER:
            self._draw_summary_ledger(summary)
        else:
            self._draw_summary_panel(summary)

        self._stamp_footers(meta)

        logger.debug(
            "Laid out %s: %d rows on %d page(s)",
            meta.title, len(self.placements), len(self.pages),
        )
        return LaidOutDocument(
            title=meta.title,
            geometry=self.geometry,
            pages=self.pages,
            row_placements=self.placements,
            totals=self.totals,
            summary=summary,
        )

    # ------------------------------------------------------------------
    # Page state
    # ------------------------------------------------------------------

    def _emit(self, command: DrawCommand):
        self.pages[self.cursor.page_index].commands.append(command)

    def _start_new_page(self, top: float):
        index = self.cursor.new_page(top)
        self.pages.append(Page(index=index))
        logger.debug("Page break: now on page %d", index + 1)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _draw_document_header(self, meta: DocumentMeta, logo: Optional[bytes]):
        """Logo and centred header lines; first page only."""
        template = self.template
        geo = self.geometry

        if logo:
            width, height = template.logo_size
            self._emit(ImageCommand(
                data=logo,
                x=(geo.page_width - width) / 2,
                y=self.cursor.y,
                width=width,
                height=height,
            ))
            self.cursor.advance(height + template.logo_gap)

        for line in meta.header_lines:
            self._emit(TextCommand(
                text=line.text,
                x=geo.center_x,
                y=self.cursor.y,
                font=line.font,
                size=line.size,
                align="center",
                role="header",
            ))
            self.cursor.advance(line.advance)

    def _draw_info_block(self, info: InfoBlock):
        geo = self.geometry
        panel_width = geo.content_width / 2 - 10
        left_x = geo.margin
        right_x = geo.margin + geo.content_width / 2 + 10
        top = self.cursor.y

        def draw_panel(x: float, entries: List[Tuple[str, str]], value_offset: float) -> int:
            line_no = 0
            for label, value in entries:
                y = top + line_no * info.line_height
                self._emit(TextCommand(
                    text=label, x=x, y=y, font=FONT_REGULAR, size=info.font_size, role="header",
                ))
                lines = self.measurer.wrap(value, panel_width - value_offset, FONT_BOLD, info.font_size)
                for offset, text in enumerate(lines):
                    self._emit(TextCommand(
                        text=text,
                        x=x + value_offset,
                        y=y + offset * info.line_height,
                        font=FONT_BOLD,
                        size=info.font_size,
                        role="header",
                    ))
                line_no += len(lines)
            return line_no

        left_lines = draw_panel(left_x, info.left, info.left_value_offset)
        right_lines = draw_panel(right_x, info.right, info.right_value_offset)
        self.cursor.advance(max(left_lines, right_lines) * info.line_height + info.gap_after)

    def _draw_column_header(self):
        template = self.template
        geo = self.geometry
        y = self.cursor.y

        if template.header_band_color is not None:
            self._emit(FillCommand(
                x=geo.margin,
                y=y,
                width=geo.content_width,
                height=template.header_height,
                color=template.header_band_color,
                role="column_header",
            ))

        for column in template.columns:
            self._emit(TextCommand(
                text=column.label,
                x=column.x,
                y=y + template.header_baseline,
                font=FONT_BOLD,
                size=template.header_font_size,
                align=column.alignment,
                role="column_header",
            ))

        if template.header_rule_offset is not None:
            rule_y = y + template.header_rule_offset
            self._emit(LineCommand(
                x1=geo.margin, y1=rule_y, x2=geo.right_edge, y2=rule_y, role="column_header",
            ))

        self.cursor.advance(template.header_height)

    def _measure_row(self, row: Mapping[str, Any]) -> Tuple[float, List[str], List[str]]:
        """Height of a row plus the wrapped lines of its wrap column, if any."""
        template = self.template
        wrap_column = template.wrap_column
        if wrap_column is None:
            return template.row_height, [], []

        name_lines = self.measurer.wrap(
            wrap_column.render(row.get(wrap_column.key)),
            wrap_column.wrap_width,
            FONT_REGULAR,
            template.row_font_size,
        )
        sub_lines: List[str] = []
        sub_values = row.get(template.sub_line_key) if template.sub_line_key else None
        if sub_values:
            sub_lines = self.measurer.wrap(
                template.sub_line_prefix + ", ".join(str(v) for v in sub_values),
                wrap_column.wrap_width - template.sub_line_indent,
                FONT_ITALIC,
                template.sub_line_size,
            )
        height = max(
            template.min_row_height,
            len(name_lines) * template.line_height
            + len(sub_lines) * template.sub_line_height
            + template.row_padding,
        )
        return height, name_lines, sub_lines

    def _draw_row(self, index: int, row: Mapping[str, Any]):
        template = self.template
        geo = self.geometry

        height, name_lines, sub_lines = self._measure_row(row)

        if self.cursor.y + height > geo.page_break_threshold:
            self._start_new_page(geo.top_margin)
            self._draw_column_header()

        y = self.cursor.y
        if template.zebra_color is not None and index % 2 == 0:
            self._emit(FillCommand(
                x=geo.margin,
                y=y + template.zebra_offset,
                width=geo.content_width,
                height=template.row_height,
                color=template.zebra_color,
            ))

        text_y = y + template.row_baseline
        for column in template.columns:
            if column is template.wrap_column:
                for offset, text in enumerate(name_lines):
                    self._emit(TextCommand(
                        text=text,
                        x=column.x,
                        y=text_y + offset * template.line_height,
                        font=FONT_REGULAR,
                        size=template.row_font_size,
                        align=column.alignment,
                    ))
                sub_top = text_y + len(name_lines) * template.line_height
                for offset, text in enumerate(sub_lines):
                    self._emit(TextCommand(
                        text=text,
                        x=column.x + template.sub_line_indent,
                        y=sub_top + offset * template.sub_line_height,
                        font=FONT_ITALIC,
                        size=template.sub_line_size,
                        align=column.alignment,
                    ))
                continue

            self._emit(TextCommand(
                text=column.render(row.get(column.key)),
                x=column.x,
                y=text_y,
                font=FONT_REGULAR,
                size=template.row_font_size,
                align=column.alignment,
            ))

        if template.row_rule_color is not None:
            self._emit(LineCommand(
                x1=geo.margin, y1=y + height, x2=geo.right_edge, y2=y + height,
                color=template.row_rule_color, role="row",
            ))

        self.placements.append(RowPlacement(
            row_index=index, page_index=self.cursor.page_index, y_top=y, height=height,
        ))
        self.cursor.advance(height)

    def _draw_closing_rule(self, summary: Summary):
        """Rule under the table, with the grand total line when configured."""
        template = self.template
        geo = self.geometry

        if template.grand_total_label is not None:
            if self.cursor.y + template.grand_total_height > geo.page_break_threshold:
                self._start_new_page(geo.top_margin)
            self.cursor.advance(2)
            self._draw_rule()
            self.cursor.advance(6)
            for text, x in (
                (template.grand_total_label, template.grand_total_label_x),
                (summary.grand_total or "", template.grand_total_value_x),
            ):
                self._emit(TextCommand(
                    text=text, x=x, y=self.cursor.y, font=FONT_BOLD,
                    size=template.header_font_size, role="totals",
                ))
            self.cursor.advance(10)
        elif template.closing_rule:
            self.cursor.advance(5)
            self._draw_rule()
            self.cursor.advance(10)

    def _draw_rule(self):
        geo = self.geometry
        self._emit(LineCommand(
            x1=geo.margin, y1=self.cursor.y, x2=geo.right_edge, y2=self.cursor.y, role="totals",
        ))

    def _ensure_summary_room(self, height: float):
        if self.cursor.y + height > self.geometry.summary_limit:
            self._start_new_page(self.geometry.summary_top)

    def _draw_summary_panel(self, summary: Summary):
        """Tinted title band followed by a two-column grid of fields."""
        template = self.template
        geo = self.geometry

        self._ensure_summary_room(template.summary_height)

        self._emit(FillCommand(
            x=geo.margin,
            y=self.cursor.y - 5,
            width=geo.content_width,
            height=8,
            color=template.summary_band_color,
            role="summary",
        ))
        centred = template.summary_title_align == "center"
        self._emit(TextCommand(
            text=template.summary_title,
            x=geo.center_x if centred else geo.margin + 5,
            y=self.cursor.y,
            font=FONT_BOLD,
            size=template.summary_title_size,
            align="center" if centred else "left",
            role="summary",
        ))
        self.cursor.advance(8)

        columns = (geo.margin + 5, geo.center_x + 10)
        for start in range(0, len(summary.fields), 2):
            for (label, value), x in zip(summary.fields[start:start + 2], columns):
                self._emit(TextCommand(
                    text=f"{label}: {value}",
                    x=x,
                    y=self.cursor.y,
                    font=FONT_REGULAR,
                    size=template.summary_body_size,
                    role="summary",
                ))
            self.cursor.advance(6)

    def _draw_summary_ledger(self, summary: Summary):
        """Right-aligned label/value lines, then the closing message."""
        template = self.template

        height = template.ledger_gap + sum(line.advance for line in summary.lines)
        self._ensure_summary_room(height)
        self.cursor.advance(template.ledger_gap)

        for line in summary.lines:
            font = FONT_BOLD if line.bold else FONT_REGULAR
            for text, x in ((line.label, template.ledger_label_x), (line.value, template.ledger_value_x)):
                self._emit(TextCommand(
                    text=text, x=x, y=self.cursor.y, font=font, size=line.size,
                    align="right", role="summary",
                ))
            self.cursor.advance(line.advance)

        if template.closing_text:
            self.cursor.move_to(max(self.cursor.y, template.closing_y))
            self._emit(TextCommand(
                text=template.closing_text,
                x=self.geometry.center_x,
                y=self.cursor.y,
                font=FONT_ITALIC,
                size=10,
                align="center",
                role="closing",
            ))

    def _stamp_footers(self, meta: DocumentMeta):
        """Second pass: the page count is only known once layout is done."""
        geo = self.geometry
        total = len(self.pages)
        generated = format_date(meta.generated_on)

        for page in self.pages:
            for text, x, y, align in (
                (f"Generated by: {meta.generated_by}", geo.margin, geo.footer_y, "left"),
                (f"Report Generated: {generated}", geo.margin, geo.footer_y + geo.footer_leading, "left"),
                (f"Page {page.index + 1} of {total}", geo.right_edge, geo.footer_y, "right"),
            ):
                page.commands.append(TextCommand(
                    text=text, x=x, y=y, font=FONT_REGULAR, size=7,
                    align=align, color=FOOTER_GRAY, role="footer",
                ))
