"""In-memory stand-in for the supabase-py client used by the API tests."""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from supabase import AuthApiError


ANON_AUTHORIZATION = "Bearer anon-key"


TABLE_DEFAULTS = {
    "profiles": {
        "bio": None,
        "skills": None,
        "social_links": None,
        "profile_pic": None,
        "quote": None,
        "public": True,
        "first_login": True,
    },
    "pages": {"content": "", "published": False},
    "comments": {"updated_at": None},
    "media": {},
    "profile_views": {"visitor_id": None},
}


TIMESTAMP_COLUMNS = {
    "profiles": ("created_at", "updated_at"),
    "pages": ("created_at", "updated_at"),
    "comments": ("created_at",),
    "media": ("uploaded_at",),
    "profile_views": ("visited_at",),
}


class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the postgrest query builder for the services under test."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = []
        self._limit = None
        self._offset = 0
        self.mode = None
        self.count = None
        self.head = False

    def select(self, columns="*", count=None, head=False):
        self.count = count
        self.head = head
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by.append((column, desc))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def offset(self, n):
        self._offset = n
        return self

    def single(self):
        self.mode = "single"
        return self

    def maybe_single(self):
        self.mode = "maybe_single"
        return self

    def execute(self):
        if (self.table, self.op) in self.db.failures:
            raise Exception(f"simulated {self.op} failure on {self.table}")
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for payload in payloads:
                row = {"id": str(uuid.uuid4()), **TABLE_DEFAULTS.get(self.table, {})}
                for column in TIMESTAMP_COLUMNS.get(self.table, ()):
                    row[column] = self.db.now()
                row.update(payload)
                rows.append(row)
                inserted.append(dict(row))
            return FakeResult(inserted)

        matched = [r for r in rows if all(f(r) for f in self.filters)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResult([dict(r) for r in matched])

        if self.op == "delete":
            rows[:] = [r for r in rows if not any(r is m for m in matched)]
            return FakeResult([dict(r) for r in matched])

        for column, desc in reversed(self.order_by):
            matched = sorted(
                matched,
                key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else ""),
                reverse=desc,
            )
        total = len(matched)
        matched = matched[self._offset:]
        if self._limit is not None:
            matched = matched[: self._limit]
        data = [] if self.head else [dict(r) for r in matched]

        if self.mode == "single":
            if len(data) != 1:
                raise Exception("JSON object requested, multiple (or no) rows returned")
            return FakeResult(data[0])
        if self.mode == "maybe_single":
            return FakeResult(data[0]) if data else None
        return FakeResult(data, total if self.count else None)


class FakeAuthApiError(AuthApiError):
    """AuthApiError with a stable constructor across supabase releases."""

    def __init__(self, message, status=400):
        Exception.__init__(self, message)
        self.message = message
        self.status = status
        self.code = None
        self.name = "AuthApiError"


class FakeAuthAdmin:
    def __init__(self, auth):
        self.auth = auth

    def update_user_by_id(self, user_id, attributes):
        record = self.auth.users.get(user_id)
        if record is None:
            return SimpleNamespace(user=None)
        record.update(attributes)
        return SimpleNamespace(user=self.auth.as_user(record))

    def sign_out(self, jwt, scope="global"):
        self.auth.revoked.append(jwt)
        self.auth.tokens.pop(jwt, None)


class FakeAuth:
    """Auth API of one client; users and tokens are shared with sibling clients."""

    def __init__(self, client, users=None, tokens=None, revoked=None):
        self.client = client
        self.users = users if users is not None else {}
        self.tokens = tokens if tokens is not None else {}
        self.revoked = revoked if revoked is not None else []
        self.admin = FakeAuthAdmin(self)

    def as_user(self, record):
        return SimpleNamespace(
            id=record["id"],
            email=record["email"],
            user_metadata=record.get("user_metadata", {}),
            app_metadata={},
            created_at=record["created_at"],
            updated_at=None,
        )

    def token_for(self, user_id):
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return token

    def _start_session(self, record):
        # supabase-py rebinds the issuing client's PostgREST headers on SIGNED_IN
        token = self.token_for(record["id"])
        self.client.headers["Authorization"] = f"Bearer {token}"
        return SimpleNamespace(access_token=token)

    def sign_up(self, credentials):
        email = credentials["email"]
        if any(u["email"] == email for u in self.users.values()):
            raise FakeAuthApiError("User already registered", status=422)
        record = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": credentials["password"],
            "user_metadata": credentials.get("options", {}).get("data", {}),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.users[record["id"]] = record
        return SimpleNamespace(user=self.as_user(record), session=self._start_session(record))

    def sign_in_with_password(self, credentials):
        for record in self.users.values():
            if record["email"] == credentials["email"] and record["password"] == credentials["password"]:
                return SimpleNamespace(user=self.as_user(record), session=self._start_session(record))
        raise FakeAuthApiError("Invalid login credentials")

    def get_user(self, jwt=None):
        user_id = self.tokens.get(jwt)
        if user_id is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.as_user(self.users[user_id]))


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        self.storage.objects[(self.name, path)] = (file, file_options or {})
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.objects = {}

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    def __init__(self, parent=None):
        self.headers = {"Authorization": ANON_AUTHORIZATION}
        self.spawned = []
        if parent is None:
            self.tables = {}
            self.failures = set()
            self.auth = FakeAuth(self)
            self.storage = FakeStorage()
            self._base = datetime.now(timezone.utc)
            self._tick = 0
        else:
            self.tables = parent.tables
            self.failures = parent.failures
            self.auth = FakeAuth(self, parent.auth.users, parent.auth.tokens, parent.auth.revoked)
            self.storage = parent.storage
            self._base = parent._base
            self._tick = parent._tick

    def spawn(self):
        """A separate client against the same project, like SupabaseClient.new_client()"""
        child = FakeSupabase(parent=self)
        self.spawned.append(child)
        return child

    def now(self):
        self._tick += 1
        return (self._base + timedelta(milliseconds=self._tick)).isoformat()

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op):
        self.failures.add((table, op))

    def rows(self, table, **equals):
        return [r for r in self.tables.get(table, []) if all(r.get(k) == v for k, v in equals.items())]

    def find(self, table, **equals):
        found = self.rows(table, **equals)
        return found[0] if found else None

    def seed(self, table, **values):
        return self.table(table).insert(values).execute().data[0]
