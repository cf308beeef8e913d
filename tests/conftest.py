# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("FORUM_BACKGROUND_SWEEPS", "false")
os.environ.setdefault("FORUM_BCRYPT_ROUNDS", "4")

from forum_core.api.v1.dependencies import get_services
from forum_core.core import security
from forum_core.db.session import build_engine, build_session_factory, create_tables, drop_tables
from forum_core.main import app as fastapi_app
from forum_core.models import Comment, Post, User
from forum_core.services import (
    AuthService,
    ForumServices,
    RateLimiter,
    ReactionEngine,
    SessionManager,
)

TEST_PASSWORD = "hunter22"
TEST_RATE_LIMIT = 5
TEST_RATE_WINDOW = 60.0

_USER_COUNTER = count(1)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    # File-backed so that worker threads get their own connections.
    engine = build_engine(f"sqlite:///{tmp_path / 'forum.db'}", timeout_seconds=30.0)
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return build_session_factory(engine)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def session_manager(session_factory: sessionmaker[Session]) -> SessionManager:
    return SessionManager(session_factory)


@pytest.fixture()
def rate_limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(max_requests=TEST_RATE_LIMIT, window_seconds=TEST_RATE_WINDOW, clock=clock)


@pytest.fixture()
def reaction_engine(session_factory: sessionmaker[Session]) -> ReactionEngine:
    return ReactionEngine(session_factory)


@pytest.fixture()
def auth_service(
    session_factory: sessionmaker[Session],
    session_manager: SessionManager,
) -> AuthService:
    return AuthService(session_factory, session_manager)


@pytest.fixture()
def services(
    session_manager: SessionManager,
    rate_limiter: RateLimiter,
    reaction_engine: ReactionEngine,
    auth_service: AuthService,
) -> ForumServices:
    return ForumServices(
        sessions=session_manager,
        rate_limiter=rate_limiter,
        reactions=reaction_engine,
        auth=auth_service,
        session_sweep_interval_seconds=60.0,
    )


@pytest.fixture()
def make_user(session_factory: sessionmaker[Session]) -> Callable[..., User]:
    def _make_user(
        username: str | None = None,
        *,
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> User:
        index = next(_USER_COUNTER)
        username = username or f"user_{index}"
        with session_factory.begin() as db:
            user = User(
                email=email or f"{username}@example.com",
                username=username,
                password_hash=security.hash_password(password),
            )
            db.add(user)
            db.flush()
        return user

    return _make_user


@pytest.fixture()
def make_post(session_factory: sessionmaker[Session]) -> Callable[[User], Post]:
    def _make_post(author: User, title: str = "Hello") -> Post:
        with session_factory.begin() as db:
            post = Post(user_id=author.id, title=title, content="First post body")
            db.add(post)
            db.flush()
        return post

    return _make_post


@pytest.fixture()
def make_comment(session_factory: sessionmaker[Session]) -> Callable[[Post, User], Comment]:
    def _make_comment(post: Post, author: User) -> Comment:
        with session_factory.begin() as db:
            comment = Comment(post_id=post.id, user_id=author.id, content="Nice post")
            db.add(comment)
            db.flush()
        return comment

    return _make_comment


@pytest.fixture()
def app(services: ForumServices) -> Iterator[FastAPI]:
    fastapi_app.dependency_overrides[get_services] = lambda: services
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.pop(get_services, None)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    # No context manager: startup would build the production service graph.
    return TestClient(app, base_url="http://test")


@pytest.fixture()
def login(client: TestClient) -> Callable[[User], TestClient]:
    """Log ``user`` in through the API; the client keeps the session cookie."""

    def _login(user: User, password: str = TEST_PASSWORD) -> TestClient:
        response = client.post(
            "/api/v1/auth/login",
            json={"login": user.username, "password": password},
        )
        assert response.status_code == 200, response.text
        return client

    return _login
