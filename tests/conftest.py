"""Shared test fixtures: in-memory Firebase and Stripe stand-ins."""

import json
import uuid
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from firebase_admin import auth, firestore

from desviciar.core.dependencies import get_current_uid
from desviciar.core.firebase import get_firebase
from desviciar.main import app
from desviciar.services.billing_gateway import WebhookVerificationError, get_billing_gateway

VALID_SIGNATURE = "t=1,v1=valid"
TEST_UID = "uid-test-user"

_OPS = {
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
    "==": lambda a, b: a == b,
}


def _apply(target: Dict[str, Any], data: Dict[str, Any]) -> None:
    for key, value in data.items():
        if value is firestore.DELETE_FIELD:
            target.pop(key, None)
        else:
            target[key] = value


class FakeSnapshot:
    def __init__(self, ref: "FakeDocument", data: Optional[Dict[str, Any]]):
        self.reference = ref
        self.id = ref.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, db: "FakeFirestore", path: str, doc_id: str):
        self._db = db
        self.path = path
        self.id = doc_id

    def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        self._db.writes.append(("set", self.path, dict(data), merge))
        current = self._db.docs.get(self.path) if merge else None
        current = dict(current) if current else {}
        _apply(current, data)
        self._db.docs[self.path] = current

    def update(self, data: Dict[str, Any]) -> None:
        if self.path not in self._db.docs:
            raise KeyError(f"No document to update: {self.path}")
        self._db.writes.append(("update", self.path, dict(data), True))
        _apply(self._db.docs[self.path], data)

    def get(self) -> FakeSnapshot:
        return FakeSnapshot(self, self._db.docs.get(self.path))

    def collection(self, name: str) -> "FakeQuery":
        return FakeQuery(self._db, f"{self.path}/{name}")


class FakeQuery:
    def __init__(self, db: "FakeFirestore", path: str, filters=None, order=None, limit=None):
        self._db = db
        self.path = path
        self._filters = filters or []
        self._order = order
        self._limit = limit

    def document(self, doc_id: Optional[str] = None) -> FakeDocument:
        doc_id = doc_id or uuid.uuid4().hex[:20]
        return FakeDocument(self._db, f"{self.path}/{doc_id}", doc_id)

    def where(self, filter) -> "FakeQuery":
        return FakeQuery(self._db, self.path, self._filters + [filter], self._order, self._limit)

    def order_by(self, field: str) -> "FakeQuery":
        return FakeQuery(self._db, self.path, self._filters, field, self._limit)

    def limit(self, count: int) -> "FakeQuery":
        return FakeQuery(self._db, self.path, self._filters, self._order, count)

    def stream(self):
        prefix = self.path + "/"
        results = []
        for path, data in self._db.docs.items():
            if not path.startswith(prefix) or "/" in path[len(prefix):]:
                continue
            if all(
                f.field_path in data and _OPS[f.op_string](data[f.field_path], f.value)
                for f in self._filters
            ):
                doc_id = path[len(prefix):]
                results.append(FakeSnapshot(FakeDocument(self._db, path, doc_id), data))
        if self._order:
            results.sort(key=lambda snap: snap.to_dict()[self._order])
        if self._limit is not None:
            results = results[:self._limit]
        return iter(results)


class FakeFirestore:
    """Dict-backed Firestore keyed by document path."""

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.writes: List[tuple] = []

    def collection(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def put(self, path: str, data: Dict[str, Any]) -> None:
        """Seed a document without recording a write."""
        self.docs[path] = dict(data)


class FakeUserRecord:
    def __init__(self, uid: str, email: str, email_verified: bool):
        self.uid = uid
        self.email = email
        self.email_verified = email_verified


class FakeAuth:
    def __init__(self):
        self.users: Dict[str, FakeUserRecord] = {}
        self.created: List[str] = []
        self.tokens: Dict[str, str] = {}
        # Simulates a concurrent delivery creating the user between lookup and create
        self.race_on_create = False

    def add_user(self, uid: str, email: str) -> FakeUserRecord:
        record = FakeUserRecord(uid, email, True)
        self.users[email] = record
        return record

    def get_user_by_email(self, email: str) -> FakeUserRecord:
        if email not in self.users:
            raise auth.UserNotFoundError(f"No user record found for email: {email}")
        return self.users[email]

    def create_user(self, email: str, email_verified: bool = False) -> FakeUserRecord:
        if self.race_on_create:
            self.add_user(f"uid-raced-{len(self.users)}", email)
            raise auth.EmailAlreadyExistsError("The user with the provided email already exists", None, None)
        if email in self.users:
            raise auth.EmailAlreadyExistsError("The user with the provided email already exists", None, None)
        record = FakeUserRecord(f"uid-{len(self.users) + 1}", email, email_verified)
        self.users[email] = record
        self.created.append(email)
        return record

    def verify_id_token(self, token: str) -> Dict[str, Any]:
        if token not in self.tokens:
            raise auth.InvalidIdTokenError("Invalid token")
        return {"uid": self.tokens[token]}


class FakeFirebase:
    """Stands in for FirebaseContext."""

    def __init__(self):
        self.db = FakeFirestore()
        self.auth = FakeAuth()
        self.sent: List[Any] = []
        self.send_errors: Dict[str, Exception] = {}

    def send_message(self, message) -> str:
        error = self.send_errors.get(message.token)
        if error is not None:
            raise error
        self.sent.append(message)
        return f"projects/test/messages/{len(self.sent)}"


class FakeBillingGateway:
    """Accepts VALID_SIGNATURE only; customers come from a dict."""

    def __init__(self):
        self.customers: Dict[str, Dict[str, Any]] = {}
        self.customer_lookups: List[str] = []

    def construct_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        if signature != VALID_SIGNATURE:
            raise WebhookVerificationError("No signatures found matching the expected signature for payload")
        return json.loads(payload)

    def retrieve_customer(self, customer_id: str) -> Dict[str, Any]:
        self.customer_lookups.append(customer_id)
        if customer_id not in self.customers:
            raise RuntimeError(f"No such customer: '{customer_id}'")
        return self.customers[customer_id]


def make_event(event_type: str, obj: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": "evt_test", "type": event_type, "data": {"object": obj}}


@pytest.fixture
def firebase() -> FakeFirebase:
    return FakeFirebase()


@pytest.fixture
def billing() -> FakeBillingGateway:
    return FakeBillingGateway()


@pytest.fixture
def client(firebase: FakeFirebase, billing: FakeBillingGateway):
    """HTTP client with Firebase and Stripe swapped for fakes."""
    app.dependency_overrides[get_firebase] = lambda: firebase
    app.dependency_overrides[get_billing_gateway] = lambda: billing
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client: TestClient):
    """Client whose requests are authenticated as TEST_UID."""
    app.dependency_overrides[get_current_uid] = lambda: TEST_UID
    return client
