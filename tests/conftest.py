"""
Shared pytest fixtures
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from adapters.mock.journal_source import InMemoryJournalSource
from core.config.loader import Settings


# Fixed reference time for journal tests
NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir() -> Path:
    """OS independent temporary directory"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """settings.yaml in demo mode pointing at a temporary database"""
    db_path = temp_dir / "journal.db"
    content = f"""# test settings.yaml
mode: demo

web:
  host: 0.0.0.0
  port: 9000

database:
  path: {db_path.as_posix()}
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_mode(temp_dir: Path) -> Path:
    """settings.yaml with an unknown mode"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text("mode: staging\n", encoding="utf-8")
    return settings_path


@pytest.fixture
def reset_settings():
    """Drop the Settings singleton before and after the test"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def now() -> datetime:
    """Reference time (2026-10-19 12:00 UTC)"""
    return NOW


@pytest.fixture
def source() -> InMemoryJournalSource:
    """Empty in-memory journal source"""
    return InMemoryJournalSource()


@pytest_asyncio.fixture
async def db(temp_dir: Path):
    """Writable SQLite database with the back-office schema"""
    adapter = SQLiteAdapter(temp_dir / "journal.db")
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()
