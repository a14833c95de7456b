"""
Hard-coded constants - values that practically never change

Paths must always be pathlib.Path (Windows/Linux cross-platform).
"""

from pathlib import Path


# Project root (two levels above this file: core/constants.py -> project root)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """Default values"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000
    APP_VERSION: str = "1.0.0"


class JournalDefaults:
    """Accounting journal query bounds"""

    PAGE: int = 1
    LIMIT: int = 20
    MIN_LIMIT: int = 10
    MAX_LIMIT: int = 50

    # dateDebut fallback: this many days before dateFin
    WINDOW_DAYS: int = 30

    # Accepted summary periods (days); anything else falls back to DEFAULT_PERIOD
    SUMMARY_PERIODS: tuple[int, ...] = (7, 30, 90, 365)
    DEFAULT_PERIOD: int = 30


class Paths:
    """Project paths (pathlib - OS independent)"""

    # Directories
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # Config file
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB files
    PROD_DB: Path = DATA_DIR / "tontine_prod.db"
    DEMO_DB: Path = DATA_DIR / "tontine_demo.db"
