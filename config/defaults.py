from config.schema import AppConfig, ImportConfig, ImportPolicy, RemoteConfig


def default_config() -> AppConfig:
    """Komplette Default-Konfiguration: offline, vertrauensvoller Import."""
    return AppConfig(
        institution_name="Muster-Universität",
        remote=RemoteConfig(sheet_url="", timeout_seconds=20.0),
        imports=ImportConfig(schedule_policy=ImportPolicy.TRUSTED),
    )


# ─── AUSWAHLLISTEN ───

# Funktionsstellen der Lehrkräfte (Tabellenwerte)
LECTURER_POSITIONS: tuple[str, ...] = (
    "Asisten Ahli",
    "Lektor",
    "Lektor Kepala",
    "Guru Besar",
    "LB",
    "Praktisi",
)
