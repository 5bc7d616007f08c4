import time
import uuid

import pytest

import extensions.redis_client as redis_client
from app import create_app
from constants.roles import Role
from extensions.database import db
from models import Document, Project, ProjectMember, User
from utils.password import hash_password

DEFAULT_PASSWORD = "Secret123"


class FakeRedis:
    """In-process stand-in for the handful of Redis commands the app issues."""

    def __init__(self, clock):
        self.clock = clock
        self._store = {}

    def _alive(self, key):
        item = self._store.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and expires_at <= self.clock():
            self._store.pop(key, None)
            return None
        return item

    def get(self, key):
        item = self._alive(key)
        return item[0] if item else None

    def setex(self, key, ttl, value):
        self._store[key] = (str(value), self.clock() + int(ttl))
        return True

    def exists(self, key):
        return 1 if self._alive(key) else 0

    def incr(self, key):
        item = self._alive(key)
        value = int(item[0]) + 1 if item else 1
        self._store[key] = (str(value), item[1] if item else None)
        return value

    def expire(self, key, seconds):
        item = self._alive(key)
        if not item:
            return False
        self._store[key] = (item[0], self.clock() + int(seconds))
        return True

    def ttl(self, key):
        item = self._alive(key)
        if not item:
            return -2
        if item[1] is None:
            return -1
        return int(item[1] - self.clock())

    def delete(self, key):
        return 1 if self._store.pop(key, None) else 0


class FakeClock:
    def __init__(self, start=None):
        self.now = start if start is not None else time.time()

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def fake_redis(monkeypatch, clock):
    fake = FakeRedis(clock)
    monkeypatch.setattr(redis_client, "_redis_client", fake)
    return fake


@pytest.fixture()
def app(fake_redis, clock):
    """Flask app over in-memory SQLite, tables created per test."""
    app = create_app("testing", clock=clock)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    def _create(role=Role.DEVELOPER, email=None, name=None, password=DEFAULT_PASSWORD):
        role = Role(role)
        suffix = uuid.uuid4().hex[:8]
        user = User(
            email=email or f"{role.value}_{suffix}@example.com",
            name=name or f"{role.value.title()} {suffix}",
            password_hash=hash_password(password),
            role=role.value,
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _create


@pytest.fixture()
def login(client):
    def _login(user, password=DEFAULT_PASSWORD):
        resp = client.post("/api/auth/login", json={"email": user.email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["data"]["token"]
    return _login


@pytest.fixture()
def auth_headers(login):
    def _headers(user, password=DEFAULT_PASSWORD):
        return {"Authorization": f"Bearer {login(user, password)}"}
    return _headers


@pytest.fixture()
def admin(make_user):
    return make_user(Role.ADMIN, name="Admin")


@pytest.fixture()
def lead(make_user):
    return make_user(Role.LEAD, name="Lead")


@pytest.fixture()
def developers(make_user):
    return [make_user(Role.DEVELOPER, name=f"Dev {i}") for i in (1, 2)]


@pytest.fixture()
def make_project(lead):
    """Insert a project directly, bypassing the API."""
    def _create(lead_user=None, team=(), status="active", name=None):
        from datetime import date
        project = Project(
            name=name or f"Project {uuid.uuid4().hex[:6]}",
            description="Seeded project",
            deadline=date(2030, 1, 31),
            status=status,
            lead_id=(lead_user or lead).id,
            members=[ProjectMember(user_id=u.id) for u in team],
        )
        db.session.add(project)
        db.session.commit()
        return project
    return _create


@pytest.fixture()
def make_document():
    def _create(project, uploader, data=b"hello", link=None, name="notes.txt"):
        document = Document(
            project_id=project.id,
            name=name,
            data=None if link else data,
            content_type=None if link else "text/plain",
            size=None if link else len(data),
            link=link,
            uploaded_by=uploader.id,
        )
        db.session.add(document)
        db.session.commit()
        return document
    return _create
