from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import dishduty.models  # noqa: F401
from dishduty.database import Base, get_db
from dishduty.main import app
from dishduty.routers.dishduty import get_today
from dishduty.services.auth_service import AuthService, get_auth_service
from tests.utils import ADMIN_PASSWORD, TODAY


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_service] = lambda: AuthService(ADMIN_PASSWORD)
    app.dependency_overrides[get_today] = lambda: TODAY
    # 不使用 with，lifespan 不會啟動每日指派
    yield TestClient(app)
    app.dependency_overrides.clear()
