import copy
import itertools
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from supabase import PostgrestAPIError

from fitcoach import main
from fitcoach.deps import get_supabase, get_text_generator
from fitcoach.exceptions import GenerationError

USER_ID = "user-1"
TOKEN = "token-1"


class FakeQuery:
    """Just enough of the postgrest query builder for the persistence helpers."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.row_limit = None
        self.count = None

    def select(self, columns="*", count=None):
        self.op = "select"
        self.count = count
        return self

    def insert(self, rows):
        self.op = "insert"
        self.payload = rows
        return self

    def update(self, fields):
        self.op = "update"
        self.payload = fields
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if (self.table, self.op) in self.db.failing:
            raise PostgrestAPIError(
                {"message": "connection reset", "code": "500", "hint": None, "details": None}
            )
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for row in new_rows:
                stored = {
                    "id": str(uuid.uuid4()),
                    "created_at": self.db.next_timestamp(),
                    **copy.deepcopy(row),
                }
                rows.append(stored)
                created.append(copy.deepcopy(stored))
            return SimpleNamespace(data=created, count=None)

        matched = [row for row in rows if self._matches(row)]

        if self.op == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return SimpleNamespace(data=copy.deepcopy(matched), count=None)

        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(matched), count=None)

        if self.order_by:
            column, desc = self.order_by
            matched.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        if self.row_limit is not None:
            matched = matched[: self.row_limit]
        count = len(matched) if self.count == "exact" else None
        return SimpleNamespace(data=copy.deepcopy(matched), count=count)


class FakeAuth:
    def __init__(self, users):
        self.users = users

    def get_user(self, token):
        user = self.users.get(token)
        return SimpleNamespace(user=user)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        # (table, op) pairs whose execute() raises like a failed postgrest call
        self.failing = set()
        self._clock = itertools.count(1)
        self.auth = FakeAuth(
            {TOKEN: SimpleNamespace(id=USER_ID, email="sam@example.com")}
        )

    def next_timestamp(self):
        return f"2026-01-01T00:00:{next(self._clock):02d}+00:00"

    def table(self, name):
        return FakeQuery(self, name)


class StubGenerator:
    """Stands in for TextGenerator; returns (or raises) canned replies in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    async def generate(self, prompt, model=None, timeout=None, temperature=None):
        self.calls.append({"prompt": prompt, "timeout": timeout, "temperature": temperature})
        if not self.replies:
            raise GenerationError("no stub reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(name="fake_db")
def fake_db_fixture():
    db = FakeSupabase()
    db.tables["profiles"] = [
        {
            "id": USER_ID,
            "display_name": "Sam",
            "fitness_goal": "Weight Loss",
            "diet_preference": "Vegetarian",
            "weight_kg": 72,
            "height_cm": 178,
        }
    ]
    return db


@pytest.fixture(name="ai")
def ai_fixture():
    return StubGenerator()


@pytest.fixture(name="anon_client")
def anon_client_fixture(fake_db, ai):
    main.app.dependency_overrides[get_supabase] = lambda: fake_db
    main.app.dependency_overrides[get_text_generator] = lambda: ai
    client = TestClient(main.app)
    yield client
    main.app.dependency_overrides.clear()


@pytest.fixture(name="client")
def client_fixture(anon_client):
    anon_client.headers["Authorization"] = f"Bearer {TOKEN}"
    return anon_client
