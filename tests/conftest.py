# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeSupabase: an in-memory stand-in for the Supabase query builder,
#   installed as the SupabaseClient singleton so real queries run against it
# - FastAPI TestClient and sample rows
# =============================================================================

import hashlib
import hmac
import json
import os
import re
import tempfile
import time
import uuid
from datetime import datetime, timedelta, timezone

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="marketplace-uploads-"))
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from lib.supabase_client import SupabaseClient

WEBHOOK_SECRET = os.environ["STRIPE_WEBHOOK_SECRET"]


# =============================================================================
# In-memory Supabase
# =============================================================================

class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


def _split_top_level(expr: str) -> list[str]:
    """Split a PostgREST logic expression on commas outside parentheses."""
    parts, depth, current = [], 0, ""
    for char in expr:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def _ilike(value, pattern: str) -> bool:
    if value is None:
        return False
    regex = ".*".join(re.escape(piece) for piece in pattern.split("%"))
    return re.fullmatch(regex, str(value), re.IGNORECASE | re.DOTALL) is not None


def _parse_condition(term: str):
    if term.startswith("and(") and term.endswith(")"):
        subs = [_parse_condition(t) for t in _split_top_level(term[4:-1])]
        return lambda row: all(sub(row) for sub in subs)
    if term.startswith("or(") and term.endswith(")"):
        subs = [_parse_condition(t) for t in _split_top_level(term[3:-1])]
        return lambda row: any(sub(row) for sub in subs)

    column, op, value = term.split(".", 2)
    if op == "eq":
        return lambda row: str(row.get(column)) == value
    if op == "ilike":
        return lambda row: _ilike(row.get(column), value)
    raise ValueError(f"Unsupported operator in fake: {op}")


class FakeQuery:
    """Chainable query mirroring the parts of postgrest-py the app uses."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.range_bounds = None
        self.limit_count = None
        self.want_single = False

    # -- operations -------------------------------------------------------

    def select(self, *columns, count=None):
        self.op = "select"
        return self

    def insert(self, rows):
        self.op = "insert"
        self.payload = rows if isinstance(rows, list) else [rows]
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    # -- filters ----------------------------------------------------------

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def ilike(self, column, pattern):
        self.filters.append(lambda row: _ilike(row.get(column), pattern))
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def or_(self, expr):
        condition = _parse_condition(f"or({expr})")
        self.filters.append(condition)
        return self

    # -- modifiers --------------------------------------------------------

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def range(self, start, end):
        self.range_bounds = (start, end)
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def single(self):
        self.want_single = True
        return self

    # -- execution --------------------------------------------------------

    def _matching(self):
        rows = self.db.tables.setdefault(self.table_name, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table_name, self.op))
        if (self.table_name, self.op) in self.db.failures:
            raise Exception(f"simulated {self.op} failure on {self.table_name}")

        if self.op == "insert":
            return FakeResponse([self.db.store(self.table_name, row) for row in self.payload])

        if self.op == "update":
            updated = []
            for row in self._matching():
                row.update(self.payload)
                updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == "delete":
            removed = self._matching()
            self.db.remove(self.table_name, removed)
            return FakeResponse([dict(row) for row in removed])

        rows = [dict(row) for row in self._matching()]
        if self.order_by:
            column, desc = self.order_by
            rows.sort(key=lambda row: row.get(column) or "", reverse=desc)
        total = len(rows)
        if self.range_bounds:
            start, end = self.range_bounds
            rows = rows[start:end + 1]
        if self.limit_count is not None:
            rows = rows[:self.limit_count]

        if self.want_single:
            if len(rows) != 1:
                raise Exception(
                    "{'code': 'PGRST116', 'message': 'JSON object requested, multiple (or no) rows returned'}"
                )
            return FakeResponse(rows[0])

        return FakeResponse(rows, count=total)


class FakeSupabase:
    """
    In-memory tables with generated ids and increasing timestamps.

    Deleting a listing removes its messages, like the ON DELETE CASCADE
    foreign key in the real schema.
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {"listings": [], "messages": [], "orders": []}
        self.calls: list[tuple[str, str]] = []
        self.failures: set[tuple[str, str]] = set()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def table(self, name):
        return FakeQuery(self, name)

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def store(self, table, row):
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", self._tick())
        if table == "listings":
            stored.setdefault("updated_at", stored["created_at"])
        self.tables.setdefault(table, []).append(stored)
        return dict(stored)

    def remove(self, table, rows):
        ids = {row["id"] for row in rows}
        self.tables[table] = [row for row in self.tables[table] if row["id"] not in ids]
        if table == "listings":
            self.tables["messages"] = [
                m for m in self.tables["messages"] if m.get("listing_id") not in ids
            ]

    def fail(self, table, op):
        self.failures.add((table, op))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db():
    """Install an empty FakeSupabase as the Supabase singleton."""
    previous = SupabaseClient._instance
    db = FakeSupabase()
    SupabaseClient._instance = db
    yield db
    SupabaseClient._instance = previous


@pytest.fixture
def client(fake_db):
    """TestClient that turns unexpected errors into 500 responses."""
    from app.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def upload_dir():
    """The configured upload directory, emptied after the test."""
    from app.config import settings

    path = settings.upload_path
    path.mkdir(parents=True, exist_ok=True)
    yield path
    for item in path.iterdir():
        if item.is_file():
            item.unlink()


@pytest.fixture
def listing_payload():
    """A valid POST /listings body."""
    return {
        "title": "Bike",
        "description": "Red",
        "price": 100,
        "category": "vehicles",
        "location": "Cebu",
        "seller_email": "a@x.com",
    }


@pytest.fixture
def stored_listing(fake_db, listing_payload):
    """A listing already in the database."""
    return fake_db.store("listings", dict(listing_payload, image_url=None))


def sign_webhook(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header for a payload."""
    timestamp = timestamp or int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.{payload}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def checkout_completed_event(
    session_id: str = "cs_test_123",
    listing_id: str | None = None,
    buyer_email: str = "buyer@x.com",
    amount_total: int | None = 10000,
) -> str:
    """JSON payload of a checkout.session.completed event."""
    return json.dumps({
        "id": "evt_test_1",
        "object": "event",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "amount_total": amount_total,
                "metadata": {
                    "listingId": listing_id or str(uuid.uuid4()),
                    "buyerEmail": buyer_email,
                    "sellerEmail": "a@x.com",
                },
            }
        },
    })
