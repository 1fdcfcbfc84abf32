"""In-memory stand-in for the parts of supabase.Client the services use."""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError

UNIQUE_KEYS: Dict[str, List[Tuple[str, ...]]] = {
    "profiles": [("id",)],
    "church_members": [("church_id", "user_id")],
    "attendance": [("student_id", "date")],
    "church_invite_tokens": [("token",)],
    "daily_verses": [("verse_date",)],
    "external_identities": [("provider", "external_id")],
}

TABLE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "church_members": {"role": "member"},
    "students": {"type": "student", "attendance_days": []},
    "announcements": {"is_pinned": False, "is_important": False},
    "prayer_requests": {"is_anonymous": False, "is_answered": False, "category": "일반", "status": "진행중"},
    "service_schedules": {"status": "scheduled"},
    "church_invite_tokens": {"used_count": 0},
}

TIMESTAMP_COLUMNS: Dict[str, str] = {
    "church_members": "joined_at",
    "students": "registered_at",
    "member_role_history": "changed_at",
}


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class FakeResult:
    data: Any
    count: Optional[int] = None


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: List[Callable[[dict], bool]] = []
        self.orders: List[Tuple[str, bool]] = []
        self.row_limit: Optional[int] = None

    # builders

    def select(self, columns: str = "*", **kwargs):
        if self.op == "select":
            self.columns = columns
        return self

    def insert(self, payload, **kwargs):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload, **kwargs):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self, **kwargs):
        self.op = "delete"
        return self

    def eq(self, column: str, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def gte(self, column: str, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column: str, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def order(self, column: str, desc: bool = False, **kwargs):
        self.orders.append((column, desc))
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    # execution

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self.filters)

    def _project(self, row: dict) -> dict:
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        names = [c.strip() for c in self.columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    def execute(self) -> FakeResult:
        self.db.executed.append((self.table, self.op))
        self.db.check_failure(self.table, self.op)
        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            return FakeResult(self.db.insert_rows(self.table, self.payload))
        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    candidate = {**row, **copy.deepcopy(self.payload)}
                    self.db.check_unique(self.table, candidate, ignore=row)
                    row.update(copy.deepcopy(self.payload))
                    updated.append(copy.deepcopy(row))
            return FakeResult(updated)
        if self.op == "delete":
            kept, deleted = [], []
            for row in rows:
                (deleted if self._matches(row) else kept).append(row)
            self.db.tables[self.table] = kept
            return FakeResult(copy.deepcopy(deleted))

        selected = [row for row in rows if self._matches(row)]
        for column, desc in reversed(self.orders):
            selected.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        if self.row_limit is not None:
            selected = selected[:self.row_limit]
        return FakeResult([self._project(row) for row in selected])


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResult:
        handler = self.db.rpc_handlers.get(self.name)
        if handler is None:
            raise APIError({"message": f"function {self.name} does not exist", "code": "42883"})
        return FakeResult(handler(self.db, self.params))


def create_church_with_owner(db: "FakeSupabase", params: dict) -> List[dict]:
    """Both inserts or neither, like the SQL function's transaction"""
    snapshot = db.snapshot()
    try:
        church = db.insert_rows("churches", {
            "name": params["p_name"],
            "description": params.get("p_description"),
            "owner_id": params["p_owner_id"],
        })[0]
        db.check_failure("church_members", "insert")
        db.insert_rows("church_members", {
            "church_id": church["id"],
            "user_id": params["p_owner_id"],
            "role": "admin",
        })
    except Exception:
        db.restore(snapshot)
        raise
    return [church]


# auth


@dataclass
class FakeUser:
    id: str
    email: Optional[str] = None
    user_metadata: dict = field(default_factory=dict)
    app_metadata: dict = field(default_factory=dict)


class FakeAdmin:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth
        self.signed_out: List[str] = []
        self.updated: List[Tuple[str, dict]] = []

    def create_user(self, attributes: dict):
        email = attributes["email"]
        if email in self.auth.users_by_email:
            raise Exception("A user with this email address has already been registered")
        user = FakeUser(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata=attributes.get("user_metadata") or {},
            app_metadata=attributes.get("app_metadata") or {},
        )
        self.auth.users_by_email[email] = user
        return SimpleNamespace(user=user)

    def generate_link(self, params: dict):
        email = params["email"]
        if email not in self.auth.users_by_email:
            raise Exception("User not found")
        hashed = f"hash-{uuid.uuid4().hex}"
        self.auth.pending_links[hashed] = email
        return SimpleNamespace(properties=SimpleNamespace(hashed_token=hashed), user=self.auth.users_by_email[email])

    def update_user_by_id(self, uid: str, attributes: dict):
        self.updated.append((uid, attributes))
        user = next((u for u in self.auth.users_by_email.values() if u.id == uid), None)
        if user is None:
            raise Exception("User not found")
        return SimpleNamespace(user=user)

    def sign_out(self, jwt: str, scope: str = "global"):
        self.signed_out.append(jwt)
        self.auth.tokens.pop(jwt, None)


class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, FakeUser] = {}
        self.users_by_email: Dict[str, FakeUser] = {}
        self.pending_links: Dict[str, str] = {}
        self.admin = FakeAdmin(self)

    def add_token(self, token: str, user: FakeUser) -> None:
        self.tokens[token] = user
        if user.email:
            self.users_by_email[user.email] = user

    def get_user(self, jwt: str = None):
        user = self.tokens.get(jwt)
        if user is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def verify_otp(self, params: dict):
        email = self.pending_links.pop(params.get("token_hash"), None)
        if email is None:
            raise Exception("Token has expired or is invalid")
        user = self.users_by_email[email]
        access_token = f"access-{uuid.uuid4().hex}"
        self.tokens[access_token] = user
        session = SimpleNamespace(access_token=access_token, refresh_token=f"refresh-{uuid.uuid4().hex}")
        return SimpleNamespace(user=user, session=session)


# storage


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path: str, file, file_options: dict = None):
        self.storage.objects[(self.name, path)] = (file, (file_options or {}).get("content-type"))
        return SimpleNamespace(path=path)

    def get_public_url(self, path: str) -> str:
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths: List[str]):
        for path in paths:
            self.storage.objects.pop((self.name, path), None)
        return []


class FakeStorage:
    def __init__(self):
        self.objects: Dict[Tuple[str, str], tuple] = {}

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[dict]] = {}
        self.failures: Dict[Tuple[str, str], Exception] = {}
        self.rpc_handlers: Dict[str, Callable] = {"create_church_with_owner": create_church_with_owner}
        self.rpc_calls: List[Tuple[str, dict]] = []
        self.executed: List[Tuple[str, str]] = []
        self.auth = FakeAuth()
        self.storage = FakeStorage()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict = None) -> FakeRpc:
        self.rpc_calls.append((name, params))
        return FakeRpc(self, name, params or {})

    # test helpers

    def fail_on(self, table: str, op: str, exc: Exception = None) -> None:
        self.failures[(table, op)] = exc or Exception(f"simulated {op} failure on {table}")

    def check_failure(self, table: str, op: str) -> None:
        exc = self.failures.get((table, op))
        if exc is not None:
            raise exc

    def check_unique(self, table: str, row: dict, ignore: dict = None) -> None:
        for key in UNIQUE_KEYS.get(table, []):
            value = tuple(row.get(col) for col in key)
            for existing in self.tables.get(table, []):
                if existing is ignore:
                    continue
                if tuple(existing.get(col) for col in key) == value:
                    raise APIError({
                        "message": f'duplicate key value violates unique constraint "{table}_{"_".join(key)}_key"',
                        "code": "23505",
                        "details": f"Key {key}={value} already exists.",
                        "hint": None,
                    })

    def insert_rows(self, table: str, payload) -> List[dict]:
        rows = payload if isinstance(payload, list) else [payload]
        inserted = []
        for data in rows:
            row = {**TABLE_DEFAULTS.get(table, {}), **copy.deepcopy(data)}
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault(TIMESTAMP_COLUMNS.get(table, "created_at"), now_iso())
            self.check_unique(table, row)
            self.tables.setdefault(table, []).append(row)
            inserted.append(copy.deepcopy(row))
        return inserted

    def seed(self, table: str, *rows: dict) -> List[dict]:
        return self.insert_rows(table, list(rows))

    def rows(self, table: str, **match) -> List[dict]:
        return [
            copy.deepcopy(r) for r in self.tables.get(table, [])
            if all(r.get(k) == v for k, v in match.items())
        ]

    def snapshot(self) -> Dict[str, List[dict]]:
        return copy.deepcopy(self.tables)

    def restore(self, snapshot: Dict[str, List[dict]]) -> None:
        self.tables = snapshot
