# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator, Iterator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import Table, create_engine, event, insert
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.expression import Insert

from whattowatch.api.v1.dependencies import get_catalog_client_dep
from whattowatch.db.session import Base, enable_sqlite_foreign_keys
from whattowatch.db.session import get_db as app_get_session
from whattowatch.main import app as fastapi_app
from whattowatch.models import GroupMember, Profile, WatchGroup
from whattowatch.models.group import ROLE_MEMBER, ROLE_OWNER
from whattowatch.services.catalog import CatalogError

TEST_DB_URL = "sqlite://"

# Fixed reference instant for window arithmetic.
NOW = datetime(2026, 10, 16, 20, 0, tzinfo=timezone.utc)


class FakeCatalog:
    """In-memory stand-in for ``CatalogClient`` that records every query."""

    def __init__(self) -> None:
        self.titles: dict[tuple[str, str], dict[str, Any]] = {}
        self.discover_pages: dict[str, dict[str, Any]] = {}
        self.trending_page: dict[str, Any] = {"page": 1, "total_pages": 0, "results": []}
        self.search_page: dict[str, Any] = {"page": 1, "total_pages": 0, "results": []}
        self.providers: list[dict[str, Any]] = []
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: CatalogError | None = None

    def add_title(self, movie_id: str, media_type: str = "movie", **details: Any) -> None:
        payload = {"id": int(movie_id), "poster_path": f"/{movie_id}.jpg", **details}
        if media_type == "movie":
            payload.setdefault("title", f"Movie {movie_id}")
            payload.setdefault("release_date", "2020-05-01")
        else:
            payload.setdefault("name", f"Show {movie_id}")
            payload.setdefault("first_air_date", "2018-01-01")
        self.titles[(movie_id, media_type)] = payload

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def discover(self, media_type: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("discover", (media_type, dict(params))))
        self._check()
        return self.discover_pages.get(
            media_type, {"page": 1, "total_pages": 0, "results": []}
        )

    async def trending(self, page: int = 1) -> dict[str, Any]:
        self.calls.append(("trending", page))
        self._check()
        return self.trending_page

    async def search_multi(self, query: str, page: int = 1) -> dict[str, Any]:
        self.calls.append(("search", (query, page)))
        self._check()
        return self.search_page

    async def details(self, movie_id: str, media_type: str) -> dict[str, Any]:
        self.calls.append(("details", (movie_id, media_type)))
        try:
            return self.titles[(movie_id, media_type)]
        except KeyError as exc:
            raise CatalogError("Catalog API error: 404 Not Found") from exc

    async def list_watch_providers(self) -> list[dict[str, Any]]:
        self.calls.append(("providers", None))
        self._check()
        return self.providers

    async def close(self) -> None:
        return None

    def calls_named(self, name: str) -> list[Any]:
        return [args for call, args in self.calls if call == name]


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI, db_session: Session, fake_catalog: FakeCatalog
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_catalog_client_dep] = lambda: fake_catalog
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_catalog_client_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_profile(db: Session, user_id: str, display_name: str | None = None) -> Profile:
    profile = Profile(id=user_id, display_name=display_name or user_id.title())
    db.add(profile)
    db.commit()
    return profile


def make_group(
    db: Session,
    owner_id: str,
    member_ids: tuple[str, ...] = (),
    *,
    group_id: str = "group-1",
    invite_code: str = "ABC234",
) -> WatchGroup:
    """Persist a group with ``owner_id`` as owner and the given extra members."""
    group = WatchGroup(id=group_id, name="Family", invite_code=invite_code, created_by=owner_id)
    db.add(group)
    db.flush()
    joined = NOW - timedelta(days=30)
    db.add(GroupMember(user_id=owner_id, group_id=group.id, role=ROLE_OWNER, joined_at=joined))
    for offset, member_id in enumerate(member_ids, start=1):
        db.add(
            GroupMember(
                user_id=member_id,
                group_id=group.id,
                role=ROLE_MEMBER,
                joined_at=joined + timedelta(minutes=offset),
            )
        )
    db.commit()
    return group


@pytest.fixture()
def family(db_session: Session) -> WatchGroup:
    """Three-member group: alice (owner), bob and carol."""
    for user_id in ("alice", "bob", "carol"):
        make_profile(db_session, user_id)
    return make_group(db_session, "alice", ("bob", "carol"))


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture(name="make_profile")
def make_profile_fixture(db_session: Session):
    def _make(user_id: str, display_name: str | None = None) -> Profile:
        return make_profile(db_session, user_id, display_name)

    return _make


@pytest.fixture(name="make_group")
def make_group_fixture(db_session: Session):
    def _make(owner_id: str, member_ids: tuple[str, ...] = (), **kwargs: Any) -> WatchGroup:
        return make_group(db_session, owner_id, member_ids, **kwargs)

    return _make


@pytest.fixture()
def competing_insert(engine: Engine):
    """Arm a writer that lands its own row right before the next INSERT into a table.

    The row is written on the same connection, after any lookup the code under
    test made and before its own insert reaches the database.
    """
    armed: list[Any] = []

    def _arm(table: Table, **values: Any) -> list[bool]:
        fired: list[bool] = []

        def _insert_first(conn, clauseelement, multiparams, params, execution_options):
            if fired or not isinstance(clauseelement, Insert):
                return
            if clauseelement.table.name != table.name:
                return
            fired.append(True)
            conn.execute(insert(table).values(**values))

        event.listen(engine, "before_execute", _insert_first)
        armed.append(_insert_first)
        return fired

    yield _arm
    for listener in armed:
        event.remove(engine, "before_execute", listener)
