import logging
import os
import tempfile
from pathlib import Path

# Point the app at a throwaway database before any app module reads settings
TEST_DIR = Path(tempfile.mkdtemp(prefix="devevent-tests-"))
TEST_DB_PATH = TEST_DIR / "test_devevent.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["LOG_DIR"] = str(TEST_DIR / "logs")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from app.main import app
from app.database import Base, async_session
from app.models.event import Event  # noqa: F401

# Synchronous engine on the same file, used only to reset tables between tests
sync_engine = create_engine(f"sqlite:///{TEST_DB_PATH}")

# Create a logger
logger = logging.getLogger(__name__)


# Reset the database before each test
@pytest.fixture(autouse=True)
def reset_test_db():
    """Give every test empty tables."""
    Base.metadata.drop_all(sync_engine)
    Base.metadata.create_all(sync_engine)
    yield


@pytest_asyncio.fixture
async def db_session():
    """An async session on the test database."""
    async with async_session() as session:
        yield session


@pytest.fixture
def client():
    """Get a test client with startup and shutdown run."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def event_payload():
    """A complete, valid event payload as an editor would submit it."""
    return {
        "title": "Next.js Conf 2025",
        "description": "The annual conference for the Next.js community.",
        "overview": "Talks, workshops and demos from the core team.",
        "image": "https://example.com/images/nextjs-conf.png",
        "venue": "Moscone Center",
        "location": "San Francisco, CA",
        "date": "2025-10-22",
        "time": "9:00 AM",
        "mode": "hybrid",
        "audience": "Frontend developers",
        "agenda": ["Keynote", "Workshops", "Closing panel"],
        "organizer": "Vercel",
        "tags": ["nextjs", "react", "frontend"],
    }
