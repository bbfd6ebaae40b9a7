"""Excel-Export für Stammdaten, Wochenplan und Raumauslastung (openpyxl)."""

from pathlib import Path
from typing import Any, Sequence

from analysis.occupancy import OccupancyReport
from data.tables import TableManager, TableSchema
from models.store import EntityStore

from export.helpers import (
    COLORS, OCCUPANCY_EXPORT_HEADERS, SCHEDULE_EXPORT_HEADERS,
    date_stamp, safe_filename, schedule_export_rows,
)


class ExcelExporter:
    """Schreibt je Export eine Arbeitsmappe mit genau einem Tabellenblatt."""

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H = 22

    # Spaltenbreiten (Excel-Einheiten)
    COL_MIN_W = 10
    COL_MAX_W = 40

    def __init__(self, store: EntityStore):
        self.store = store

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export_table(self, schema: TableSchema, output_dir: Path) -> Path:
        """Stammdaten-Tabelle mit Spaltenüberschriften → ``Data_<Titel>_<Datum>.xlsx``."""
        rows = TableManager(self.store, schema).export_rows()
        headers = [col.label for col in schema.columns]
        path = Path(output_dir) / f"Data_{safe_filename(schema.title)}_{date_stamp()}.xlsx"
        self._write_workbook(path, schema.title, headers, rows)
        return path

    def export_schedule(self, output_dir: Path) -> Path:
        """Kompletter Wochenplan → ``Jadwal_Kuliah_Lengkap_<Datum>.xlsx``."""
        path = Path(output_dir) / f"Jadwal_Kuliah_Lengkap_{date_stamp()}.xlsx"
        self._write_workbook(
            path, "Jadwal Kuliah", list(SCHEDULE_EXPORT_HEADERS),
            schedule_export_rows(self.store),
        )
        return path

    def export_occupancy(self, report: OccupancyReport, output_dir: Path) -> Path:
        """Raumauslastung eines Tages → ``Monitoring_Okupansi_<Tag>_<Datum>.xlsx``."""
        day = report.day.value
        rows = [
            {
                "Ruangan": r.room,
                "Kapasitas": r.capacity,
                "Jam Sesi": r.time_slot,
                "Status": r.status,
                "Mata Kuliah": r.course,
                "Kelas": r.class_name,
                "Dosen": r.lecturer,
            }
            for r in report.rows
        ]
        path = Path(output_dir) / f"Monitoring_Okupansi_{day}_{date_stamp()}.xlsx"
        self._write_workbook(
            path, f"Okupansi_{day}", list(OCCUPANCY_EXPORT_HEADERS), rows,
            highlight=("Status", "Terisi"),
        )
        return path

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = True):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=wrap, horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header_row(self, ws, headers: Sequence[str]) -> None:
        from openpyxl.styles import Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = self._center_align(wrap=False)
            cell.border = border
        ws.row_dimensions[1].height = self.ROW_HEADER_H

    # ─── Arbeitsmappe ─────────────────────────────────────────────────────────

    def _write_workbook(
        self,
        path: Path,
        sheet_title: str,
        headers: list[str],
        rows: list[dict[str, Any]],
        highlight: tuple[str, str] | None = None,
    ) -> None:
        """Schreibt Kopfzeile + Datenzeilen; ``highlight`` färbt Zeilen mit Spalte == Wert."""
        from openpyxl import Workbook
        from openpyxl.utils import get_column_letter

        wb = Workbook()
        ws = wb.active
        # Excel erlaubt max. 31 Zeichen ohne []:*?/\
        ws.title = "".join(ch for ch in sheet_title if ch not in "[]:*?/\\")[:31]

        self._write_header_row(ws, headers)
        border = self._thin_border()
        for r_idx, row in enumerate(rows, 2):
            fill = None
            if highlight and row.get(highlight[0]) == highlight[1]:
                fill = self._fill(COLORS["occupied"])
            elif r_idx % 2 == 1:
                fill = self._fill(COLORS["alt"])
            for c_idx, header in enumerate(headers, 1):
                cell = ws.cell(row=r_idx, column=c_idx, value=row.get(header, ""))
                cell.border = border
                if fill is not None:
                    cell.fill = fill

        for c_idx, header in enumerate(headers, 1):
            longest = max(
                [len(str(header))] + [len(str(row.get(header, ""))) for row in rows]
            )
            ws.column_dimensions[get_column_letter(c_idx)].width = min(
                max(longest + 2, self.COL_MIN_W), self.COL_MAX_W
            )
        ws.freeze_panes = "A2"

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(path)
