"""Benutzer, Rollen und Anmeldung.

Administratoren melden sich mit den Zugangsdaten aus der Konfiguration an,
Lehrkräfte mit ihrer NIP als Benutzername und Passwort.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from models.lecturer import Lecturer

logger = logging.getLogger(__name__)

ADMIN_USER_ID = "admin-1"


class UserRole(str, Enum):
    ADMIN = "admin"
    LECTURER = "lecturer"


class User(BaseModel):
    """Angemeldete Person (Sitzung)."""

    id: str       # "admin-1" oder Lecturer.id
    name: str
    role: UserRole


class AuthenticationError(Exception):
    """Anmeldung fehlgeschlagen."""


def authenticate(
    role: UserRole,
    username: str,
    password: str,
    lecturers: list[Lecturer],
    admin_username: str = "admin",
    admin_password: str = "admin",
) -> User:
    """Prüft die Zugangsdaten und gibt den angemeldeten Benutzer zurück.

    Raises:
        AuthenticationError: bei falschen Zugangsdaten.
    """
    if role == UserRole.ADMIN:
        if username == admin_username and password == admin_password:
            return User(id=ADMIN_USER_ID, name="Administrator", role=UserRole.ADMIN)
        raise AuthenticationError("Benutzername oder Passwort falsch.")

    lecturer = next((l for l in lecturers if l.employee_number == username), None)
    if lecturer is None or password != lecturer.employee_number:
        raise AuthenticationError(
            "Anmeldung fehlgeschlagen. NIP muss registriert sein und als Passwort dienen."
        )
    return User(id=lecturer.id, name=lecturer.name, role=UserRole.LECTURER)


# ─── Sitzung ─────────────────────────────────────────────────────────────────

def save_session(user: User, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(user.model_dump_json(indent=2))


def load_session(path: Path) -> Optional[User]:
    """Lädt die gespeicherte Sitzung. Eine beschädigte Datei wird verworfen."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return User.model_validate_json(f.read())
    except (ValidationError, json.JSONDecodeError) as e:
        logger.warning(f"Sitzungsdatei ungültig, wird entfernt: {e}")
        path.unlink(missing_ok=True)
        return None


def clear_session(path: Path) -> None:
    Path(path).unlink(missing_ok=True)
