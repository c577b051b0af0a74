# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cloudops.database.database import Base
from cloudops.database import models  # noqa: F401  (모든 테이블을 metadata에 등록)


@pytest.fixture
def engine():
    """테스트마다 새로 만드는 인메모리 SQLite 엔진. (StaticPool로 하나의 연결을 공유)"""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()
