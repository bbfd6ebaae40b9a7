"""PDF-Export der Raumauslastung (fpdf2).

Je Tag eine Seite im A4-Querformat: Zeilen = Räume, Spalten = Zeitfenster.
Ersetzt den Browser-Druck der Monitoring-Ansicht.
"""

from pathlib import Path
from typing import Sequence

from analysis.occupancy import OccupancyReport, OccupancyRow
from models.timeslot import TIME_SLOTS

from export.helpers import COLORS, date_stamp, hex_to_rgb, today_str


def _pdf_safe(text: str) -> str:
    """Ersetzt nicht-latin-1-fähige Zeichen für fpdf2-Built-in-Fonts."""
    return (
        text
        .replace("—", " - ")   # em dash
        .replace("–", "-")      # en dash
        .replace("─", "-")      # BOX DRAWINGS LIGHT HORIZONTAL
        .replace("│", "|")      # BOX DRAWINGS LIGHT VERTICAL
        .encode("latin-1", errors="replace").decode("latin-1")
    )


# ─── A4-Querformat-Dimensionen ────────────────────────────────────────────────
# Landscape A4: 297 × 210 mm
# Nutzbare Breite (Margin 10 links+rechts): 277 mm
# Spalten: Raum(37) + 5×Zeitfenster(48) = 37 + 240 = 277 mm

_COLS = {
    "room": 37,
    "slot": 48,
}
_ROW_HEADER_H = 7     # mm
_ROW_ROOM_H   = 14    # mm
_FONT_HEADER  = 8     # pt
_FONT_CONTENT = 7     # pt
_FONT_TINY    = 6     # pt
_LINE_H       = 3.5   # mm pro Zeile bei 7pt


class _SchedulePdf:
    """Interner Wrapper um fpdf.FPDF für Auslastungsseiten."""

    def __init__(self, institution_name: str):
        from fpdf import FPDF

        class _Pdf(FPDF):
            def __init__(inner, name):
                super().__init__(orientation="L", unit="mm", format="A4")
                inner._institution_name = name
                inner._entity_title = ""
                inner.alias_nb_pages()
                inner.set_auto_page_break(auto=True, margin=18)
                inner.set_margins(left=10, top=22, right=10)

            def header(inner):
                inner.set_font("Helvetica", "B", 11)
                inner.set_xy(10, 8)
                inner.cell(130, 7, _pdf_safe(inner._institution_name), border=0, align="L")
                inner.cell(0,   7, _pdf_safe(inner._entity_title), border=0, align="R")
                inner.ln(0)
                inner.set_draw_color(150, 150, 150)
                inner.line(10, 18, inner.w - 10, 18)

            def footer(inner):
                inner.set_y(-14)
                inner.set_font("Helvetica", "I", 7)
                inner.cell(
                    0, 8,
                    f"{today_str()}  |  Seite {inner.page_no()}/{{nb}}",
                    border=0, align="C",
                )

        self._pdf = _Pdf(institution_name)

    @property
    def page_count(self) -> int:
        return self._pdf.page_no()

    @property
    def page_height(self) -> float:
        return self._pdf.h

    def set_entity(self, title: str) -> None:
        self._pdf._entity_title = title

    def add_page(self) -> None:
        self._pdf.add_page()

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._pdf.output(str(path))

    def draw_text(self, x: float, y: float, text: str, size: int = _FONT_CONTENT,
                  bold: bool = False) -> None:
        self._pdf.set_font("Helvetica", "B" if bold else "", size)
        self._pdf.set_xy(x, y)
        self._pdf.cell(0, _LINE_H + 1, _pdf_safe(text), border=0, align="L")

    # ─── Zellen-Zeichnung ─────────────────────────────────────────────────────

    def draw_cell(
        self,
        x: float, y: float,
        w: float, h: float,
        text: str = "",
        bg_hex: str | None = None,
        bold: bool = False,
        font_size: int = _FONT_CONTENT,
        text_color: tuple[int, int, int] = (0, 0, 0),
        align: str = "C",
    ) -> None:
        """Zeichnet eine Zelle mit Hintergrund, Rand und zentriertem Text."""
        pdf = self._pdf

        if bg_hex:
            r, g, b = hex_to_rgb(bg_hex)
            pdf.set_fill_color(r, g, b)
            pdf.rect(x, y, w, h, style="F")

        pdf.set_draw_color(180, 180, 180)
        pdf.rect(x, y, w, h, style="D")

        if text:
            pdf.set_font("Helvetica", "B" if bold else "", font_size)
            pdf.set_text_color(*text_color)

            lines = [ln for ln in _pdf_safe(text).split("\n") if ln][:3]  # max 3 Zeilen
            total_text_h = len(lines) * _LINE_H
            y_text = y + max(1.0, (h - total_text_h) / 2)

            for line in lines:
                pdf.set_xy(x, y_text)
                pdf.cell(w, _LINE_H, line[:30], border=0, align=align)
                y_text += _LINE_H

            pdf.set_text_color(0, 0, 0)

    # ─── Tabellen-Zeilen ──────────────────────────────────────────────────────

    def draw_header_row(self, x: float, y: float, slot_labels: Sequence[str]) -> float:
        """Zeichnet die Kopfzeile (Raum | Zeitfenster …) und gibt Y danach zurück."""
        cols = [("Ruangan", _COLS["room"])] + [(s, _COLS["slot"]) for s in slot_labels]
        cx = x
        for label, w in cols:
            self.draw_cell(
                cx, y, w, _ROW_HEADER_H, label,
                bg_hex=COLORS["header"],
                bold=True,
                font_size=_FONT_HEADER,
                text_color=(255, 255, 255),
            )
            cx += w
        return y + _ROW_HEADER_H

    def draw_room_row(self, x: float, y: float, cells: list[OccupancyRow]) -> float:
        """Zeichnet die Zeile eines Raums (eine Zelle pro Zeitfenster)."""
        first = cells[0]
        self.draw_cell(
            x, y, _COLS["room"], _ROW_ROOM_H,
            f"{first.room}\n{first.capacity} Plätze",
            bold=True, font_size=_FONT_CONTENT,
        )
        cx = x + _COLS["room"]
        for row in cells:
            if row.occupied:
                color = COLORS["open"] if row.lecturer == "Open Slot" else COLORS["occupied"]
                text = f"{row.course}\n{row.class_name}\n{row.lecturer}"
            else:
                color, text = COLORS["free"], "frei"
            self.draw_cell(cx, y, _COLS["slot"], _ROW_ROOM_H, text, bg_hex=color)
            cx += _COLS["slot"]
        return y + _ROW_ROOM_H


class PdfExporter:
    """Exportiert Auslastungs-Reports in eine PDF-Datei (eine Seite je Tag)."""

    def __init__(self, institution_name: str):
        self.institution_name = institution_name

    def export_occupancy(self, reports: Sequence[OccupancyReport], output_dir: Path) -> Path:
        if not reports:
            raise ValueError("Keine Auslastungsdaten für den PDF-Export.")
        label = reports[0].day.value if len(reports) == 1 else "Woche"
        path = Path(output_dir) / f"Monitoring_Okupansi_{label}_{date_stamp()}.pdf"

        pdf = _SchedulePdf(self.institution_name)
        for report in reports:
            self._draw_report(pdf, report)
        pdf.save(path)
        return path

    def _draw_report(self, pdf: _SchedulePdf, report: OccupancyReport) -> None:
        title = f"Auslastung {report.day.value}"
        if report.search:
            title += f" (Filter: {report.search})"
        pdf.set_entity(title)
        pdf.add_page()

        x, y = 10.0, 22.0
        pdf.draw_text(
            x, y,
            f"Räume: {report.rooms}   Slots: {report.total_slots}   "
            f"belegt: {report.occupied_slots}   Auslastung: {report.occupancy_rate}%",
            bold=True,
        )
        y += 7
        y = pdf.draw_header_row(x, y, TIME_SLOTS)

        per_room = len(TIME_SLOTS)
        for start in range(0, len(report.rows), per_room):
            if y + _ROW_ROOM_H > pdf.page_height - 18:
                pdf.add_page()
                y = pdf.draw_header_row(x, 22.0, TIME_SLOTS)
            y = pdf.draw_room_row(x, y, report.rows[start:start + per_room])
