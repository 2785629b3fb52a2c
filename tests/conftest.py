"""
CampusCircle - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Set testing environment before the application reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["ADMIN_ROLL_PREFIXES"] = "ADMIN"
os.environ["LOG_FORMAT"] = "console"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SENTRY_DSN"] = ""

from campuscircle.db.base import Base  # noqa: E402
from campuscircle.db.session import build_engine, get_db  # noqa: E402
from campuscircle.main import app  # noqa: E402
from campuscircle.models import DeveloperInfo, Student  # noqa: E402
from campuscircle.services import auth_service  # noqa: E402

# (roll_number, dob, name, department, batch)
ROSTER = [
    ("ADMIN001", "2000-01-01", "Admin User", "Administration", "2020"),
    ("23CAU001", "2005-03-07", "Meera Joshi", "Computer Science", "2023"),
    ("21CAU001", "2003-05-15", "Rahul Sharma", "Computer Science", "2021"),
    ("21CAU002", "2003-07-22", "Priya Singh", "Computer Science", "2021"),
    ("22CAU003", "2004-09-08", "Divya Menon", "Electronics", "2022"),
]


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def students(session_factory) -> Dict[str, Student]:
    """Seed the sample roster, keyed by roll number."""
    async with session_factory() as session:
        rows = [
            Student(roll_number=roll, dob=dob, name=name, department=dept, batch=batch)
            for roll, dob, name, dept, batch in ROSTER
        ]
        session.add_all(rows)
        await session.commit()
    return {s.roll_number: s for s in rows}


@pytest.fixture
async def developer_info(session_factory) -> DeveloperInfo:
    async with session_factory() as session:
        info = DeveloperInfo(
            developer_name="CampusCircle Team",
            github="https://github.com/campuscircle",
            instagram="https://instagram.com/campuscircle",
            message="Built for our college community.",
        )
        session.add(info)
        await session.commit()
    return info


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override (one session per request)"""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def login(client: AsyncClient, roll_number: str, dob: str) -> Dict[str, str]:
    """Log in through the API and return bearer headers."""
    response = await client.post("/api/auth/login", json={"rollNumber": roll_number, "dob": dob})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
async def admin_headers(client: AsyncClient, students) -> Dict[str, str]:
    return await login(client, "ADMIN001", "2000-01-01")


@pytest.fixture
async def meera_headers(client: AsyncClient, students) -> Dict[str, str]:
    return await login(client, "23CAU001", "2005-03-07")


@pytest.fixture
async def rahul_headers(client: AsyncClient, students) -> Dict[str, str]:
    return await login(client, "21CAU001", "2003-05-15")


@pytest.fixture
async def accounts(db_session, students):
    """Provision accounts (via first login) for everyone except 22CAU003."""
    users = {}
    for roll, dob, *_ in ROSTER:
        if roll == "22CAU003":
            continue
        result = await auth_service.authenticate(db_session, roll, dob)
        users[roll] = result.user
    return users


@pytest.fixture
def login_as(client: AsyncClient):
    async def _login(roll_number: str, dob: str) -> Dict[str, str]:
        return await login(client, roll_number, dob)

    return _login
