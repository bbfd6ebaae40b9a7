"""Demo-Daten-Generator für den Vorlesungsplan.

Erzeugt einen reproduzierbaren lokalen Bestand (gleicher Seed → gleiche
Daten): Lehrveranstaltungen, Lehrkräfte, Räume und einen Wochenplan, der
über die Zuweisungs-Engine befüllt wird und damit konfliktfrei ist. Ein Teil
der Termine bleibt offen, damit das Portal etwas zum Übernehmen hat.
"""

import random
from typing import Optional

from config.defaults import LECTURER_POSITIONS
from models.course import Course
from models.lecturer import Lecturer
from models.room import Room
from models.store import EntityStore, default_classes
from models.timeslot import DAYS, TIME_SLOTS
from scheduling.engine import AssignmentEngine, Candidate

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_COURSES: list[tuple[str, str, int]] = [
    ("IF101", "Algoritma dan Pemrograman", 3),
    ("IF102", "Matematika Diskrit", 3),
    ("IF201", "Struktur Data", 3),
    ("IF202", "Basis Data", 3),
    ("IF203", "Sistem Operasi", 3),
    ("IF301", "Jaringan Komputer", 3),
    ("IF302", "Rekayasa Perangkat Lunak", 3),
    ("IF303", "Kecerdasan Buatan", 3),
    ("MK101", "Bahasa Indonesia", 2),
    ("MK102", "Pendidikan Pancasila", 2),
    ("MK103", "Bahasa Inggris", 2),
    ("MK104", "Statistika", 3),
]

_FIRST_NAMES = [
    "Andi", "Budi", "Citra", "Dewi", "Eko", "Fitri", "Gilang", "Hana",
    "Indra", "Joko", "Kartika", "Lestari", "Made", "Nur", "Putri", "Rizky",
]

_LAST_NAMES = [
    "Santoso", "Wijaya", "Saputra", "Hidayat", "Kurniawan", "Pratama",
    "Siregar", "Nasution", "Utami", "Halim", "Gunawan", "Setiawan",
]

_EXPERTISE = [
    "Informatika", "Sistem Informasi", "Matematika", "Statistika",
    "Jaringan", "Kecerdasan Buatan", "Bahasa",
]

_BUILDINGS = ["Gedung A", "Gedung B", "Gedung C"]


class DemoDataGenerator:
    """Generiert einen vollständigen Demo-Bestand."""

    def __init__(self, seed: Optional[int] = None, num_lecturers: int = 16,
                 num_rooms: int = 8, num_classes: int = 20,
                 num_items: int = 60, open_ratio: float = 0.25) -> None:
        self.rng = random.Random(seed)
        self.num_lecturers = num_lecturers
        self.num_rooms = num_rooms
        self.num_classes = num_classes
        self.num_items = num_items
        self.open_ratio = open_ratio

    # ─── Stammdaten ───────────────────────────────────────────────────────────

    def _generate_courses(self) -> list[Course]:
        return [
            Course(id=f"c-demo-{i}", code=code, name=name, credit_hours=sks)
            for i, (code, name, sks) in enumerate(_COURSES, 1)
        ]

    def _generate_lecturers(self) -> list[Lecturer]:
        lecturers = []
        used_names: set[str] = set()
        for i in range(1, self.num_lecturers + 1):
            while True:
                name = f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}"
                if name not in used_names:
                    used_names.add(name)
                    break
            # NIP: Geburtsdatum (8) + Einstellung JJJJMM (6) + Geschlecht + Nummer = 18
            nip = (f"19{self.rng.randint(60, 95)}{self.rng.randint(1, 12):02d}"
                   f"{self.rng.randint(1, 28):02d}20{self.rng.randint(10, 23)}"
                   f"{self.rng.randint(1, 12):02d}{self.rng.randint(1, 2)}{i:03d}")
            lecturers.append(Lecturer(
                id=f"l-demo-{i}",
                name=name,
                employee_number=nip,
                position=self.rng.choice(LECTURER_POSITIONS),
                expertise=self.rng.choice(_EXPERTISE),
            ))
        return lecturers

    def _generate_rooms(self) -> list[Room]:
        rooms = []
        for i in range(1, self.num_rooms + 1):
            building = _BUILDINGS[(i - 1) % len(_BUILDINGS)]
            rooms.append(Room(
                id=f"r-demo-{i}",
                name=f"R.{building[-1]}{100 + i}",
                capacity=self.rng.choice([30, 40, 40, 50, 60]),
                building=building,
                location=f"Lantai {self.rng.randint(1, 4)}",
            ))
        return rooms

    # ─── Wochenplan ───────────────────────────────────────────────────────────

    def _fill_schedule(self, store: EntityStore) -> int:
        """Plant zufällige Termine über die Engine ein; Konflikte werden verworfen."""
        engine = AssignmentEngine(store)
        placed = 0
        attempts = 0
        while placed < self.num_items and attempts < self.num_items * 20:
            attempts += 1
            lecturer_id = ""
            if self.rng.random() >= self.open_ratio:
                lecturer_id = self.rng.choice(store.lecturers).id
            result = engine.propose_assignment(Candidate(
                course_id=self.rng.choice(store.courses).id,
                room_id=self.rng.choice(store.rooms).id,
                class_name=self.rng.choice(store.classes).name,
                lecturer_id=lecturer_id,
                day=self.rng.choice(DAYS),
                time_slot=self.rng.choice(TIME_SLOTS),
            ))
            if result.ok:
                placed += 1
        return placed

    def generate(self, class_prefix: str = "PDB") -> EntityStore:
        """Erzeugt den vollständigen Bestand als EntityStore."""
        store = EntityStore(
            courses=self._generate_courses(),
            lecturers=self._generate_lecturers(),
            rooms=self._generate_rooms(),
            classes=default_classes(self.num_classes, class_prefix),
        )
        self._fill_schedule(store)
        return store

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, store: EntityStore) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Daten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        open_count = sum(1 for s in store.schedule if s.is_open)
        table.add_row("Lehrveranstaltungen", str(len(store.courses)), "")
        table.add_row("Lehrkräfte", str(len(store.lecturers)), "")
        table.add_row("Räume", str(len(store.rooms)),
                      f"{len({r.building for r in store.rooms})} Gebäude")
        table.add_row("Lerngruppen", str(len(store.classes)), "")
        table.add_row("Termine", str(len(store.schedule)), f"{open_count} offen")
        console.print(table)
