# tests/conftest.py
import io
import json
import os
from wsgiref.util import setup_testing_defaults

import pytest

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('PASSWORD_HASH_ROUNDS', '1000')

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from vm_inventory.database.database import Base  # noqa: E402
from vm_inventory.database import models  # noqa: E402,F401
from vm_inventory.services.identity_service import IdentityService  # noqa: E402

# ===================================================================
#  DB Fixture 설정 (테스트마다 새로운 인메모리 SQLite)
# ===================================================================

@pytest.fixture
def engine():
    """테스트마다 독립된 인메모리 SQLite 엔진을 생성합니다."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()

@pytest.fixture(autouse=True)
def clear_token_cache():
    """IdentityService의 토큰 캐시는 클래스 변수이므로 테스트 간에 비워줍니다."""
    IdentityService._token_cache.clear()
    yield
    IdentityService._token_cache.clear()

# ===================================================================
#  WSGI 호출 헬퍼
# ===================================================================

class WsgiResponse:
    def __init__(self, status, headers, body):
        self.status = status
        self.status_code = int(status.split(" ", 1)[0])
        self.headers = dict(headers)
        self.body = body

    def json(self):
        return json.loads(self.body.decode("utf-8"))


def call_app(app, method, path, body=None, headers=None):
    """WSGI 애플리케이션을 직접 호출하고 응답을 반환합니다."""
    raw = json.dumps(body).encode("utf-8") if body is not None else b""
    environ = {
        "REQUEST_METHOD": method,
        "PATH_INFO": path,
        "CONTENT_LENGTH": str(len(raw)),
        "CONTENT_TYPE": "application/json",
        "wsgi.input": io.BytesIO(raw),
    }
    for key, value in (headers or {}).items():
        environ["HTTP_" + key.upper().replace("-", "_")] = value
    setup_testing_defaults(environ)

    captured = {}

    def start_response(status, response_headers):
        captured["status"] = status
        captured["headers"] = response_headers

    body_bytes = b"".join(app(environ, start_response))
    return WsgiResponse(captured["status"], captured["headers"], body_bytes)


@pytest.fixture
def seeded_session_factory(engine, session_factory):
    """기본 역할이 시드된 DB의 세션 팩토리."""
    from vm_inventory.database.db_init import initialize_db

    initialize_db(bind=engine, session_factory=session_factory)
    return session_factory

@pytest.fixture
def make_client(seeded_session_factory):
    """옵션을 바꿔가며 WSGI 애플리케이션 클라이언트를 만드는 팩토리."""
    from vm_inventory.app import make_application

    def _make(enforce_authorization=False, api_prefix=""):
        app = make_application(
            session_factory=seeded_session_factory,
            enforce_authorization=enforce_authorization,
            api_prefix=api_prefix,
        )
        return lambda method, path, body=None, headers=None: call_app(app, method, path, body, headers)

    return _make

@pytest.fixture
def client(make_client):
    return make_client()
