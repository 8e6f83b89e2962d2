"""Shared pytest fixtures."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fake_mongo import FakeDatabase

from posbakum.config import Config
from posbakum.core.core import Core
from posbakum.core.modules.session.models import VisitorSession
from posbakum.core.modules.staff.models import Staff
from posbakum.core.modules.ticket.models import ServiceCategory

TZ = ZoneInfo("Asia/Jakarta")


@pytest.fixture
def config():
    """Test configuration that never reads the environment file."""
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/posbakum_test",
        timezone="Asia/Jakarta",
        admin_password="admin-secret",
        sequence_max_attempts=3,
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
async def core(config, database):
    """Core wired to an in-memory database, with all services started."""
    core = Core(config, database=database)
    await core.on_start()
    yield core
    await core.on_stop()


@pytest.fixture
def today():
    """A fixed office-local morning."""
    return datetime(2025, 3, 14, 9, 0, tzinfo=TZ)


@pytest.fixture
def admin(core) -> Staff:
    """Default admin account serving all categories."""
    return core.services.staff.get_staff_by_username("admin")


@pytest.fixture
async def consultation_staff(core) -> Staff:
    return await core.services.staff.create_staff("konsul", "pw-konsul", "Petugas Konsultasi", ServiceCategory.CONSULTATION)


@pytest.fixture
async def criminal_staff(core) -> Staff:
    return await core.services.staff.create_staff("pidana", "pw-pidana", "Petugas Pidana", ServiceCategory.CRIMINAL)


@pytest.fixture
def register(core, today):
    """Register a ticket for a fresh visitor session (or a given one)."""
    counter = 0

    async def _register(
        category: ServiceCategory = ServiceCategory.CONSULTATION,
        session: str | None = None,
        name: str = "Budi",
        at: datetime | None = None,
    ):
        nonlocal counter
        counter += 1
        visitor = VisitorSession(session or f"visitor-{counter}")
        return await core.services.queue.register(visitor, name, "0812000000", category, "Konsultasi", at=at or today)

    return _register
