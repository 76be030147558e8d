from datetime import datetime, timedelta, timezone

import pytest
from google.api_core.exceptions import ServiceUnavailable

from app.core.config import Settings
from app.dependencies import build_firestore_auth_service
from app.exceptions import StoreError
from app.infrastructure.persistence.firestore import user_counter_firestore
from app.infrastructure.persistence.firestore.user_counter_firestore import FirestoreUserIdAllocator
from app.infrastructure.persistence.firestore.user_repository_firestore import FirestoreUserRepository
from app.infrastructure.persistence.firestore.verification_repository_firestore import FirestoreVerificationRepository
from firebase_admin import firestore


class FakeSnapshot:
    def __init__(self, data):
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, client, collection, doc_id):
        self.client = client
        self.collection = collection
        self.id = doc_id

    def _docs(self):
        return self.client.data.setdefault(self.collection, {})

    def set(self, data):
        self.client.check()
        self._docs()[self.id] = dict(data)

    def update(self, data):
        self.client.check()
        self._docs()[self.id].update(data)

    def get(self, transaction=None):
        self.client.check()
        return FakeSnapshot(self._docs().get(self.id))


class FakeQuery:
    def __init__(self, client, collection, filters=(), limit_to=None):
        self.client = client
        self.collection = collection
        self.filters = list(filters)
        self.limit_to = limit_to

    def where(self, filter=None):
        assert filter.op_string == "=="
        return FakeQuery(self.client, self.collection, self.filters + [filter], self.limit_to)

    def limit(self, count):
        return FakeQuery(self.client, self.collection, self.filters, count)

    def stream(self):
        self.client.check()
        docs = self.client.data.get(self.collection, {}).values()
        matches = [d for d in docs if all(d.get(f.field_path) == f.value for f in self.filters)]
        if self.limit_to is not None:
            matches = matches[:self.limit_to]
        return iter([FakeSnapshot(d) for d in matches])


class FakeCollection(FakeQuery):
    def document(self, doc_id):
        return FakeDocRef(self.client, self.collection, doc_id)


class FakeTransaction:
    def __init__(self, max_attempts):
        self.max_attempts = max_attempts

    def set(self, ref, data):
        ref.set(data)

    def update(self, ref, data):
        ref.update(data)


class FakeFirestoreClient:
    def __init__(self):
        self.data = {}
        self.unavailable = False
        self.transactions = []

    def check(self):
        if self.unavailable:
            raise ServiceUnavailable("firestore is down")

    def collection(self, name):
        return FakeCollection(self, name)

    def transaction(self, max_attempts=5):
        txn = FakeTransaction(max_attempts)
        self.transactions.append(txn)
        return txn


@pytest.fixture
def client():
    return FakeFirestoreClient()


@pytest.fixture
def no_transaction_wrapper(monkeypatch):
    monkeypatch.setattr(user_counter_firestore.firestore, "transactional", lambda fn: fn)


def test_allocator_creates_counter_then_increments(client, no_transaction_wrapper):
    allocator = FirestoreUserIdAllocator(client, max_attempts=3)
    assert [allocator.next_user_id() for _ in range(3)] == [1, 2, 3]
    assert client.data["metadata"]["userCounter"] == {"lastId": 3}
    assert all(t.max_attempts == 3 for t in client.transactions)


def test_allocator_continues_existing_counter(client, no_transaction_wrapper):
    client.data["metadata"] = {"userCounter": {"lastId": 41}}
    assert FirestoreUserIdAllocator(client).next_user_id() == 42


def test_allocator_failure_raises_store_error(client, no_transaction_wrapper):
    client.unavailable = True
    with pytest.raises(StoreError) as exc:
        FirestoreUserIdAllocator(client).next_user_id()
    assert "firestore is down" in exc.value.details


def test_allocator_gives_up_after_contention(client, monkeypatch):
    def exhausted(fn):
        def wrapper(transaction, ref):
            raise ValueError("Failed to commit transaction in 5 attempts.")
        return wrapper

    monkeypatch.setattr(user_counter_firestore.firestore, "transactional", exhausted)
    with pytest.raises(StoreError):
        FirestoreUserIdAllocator(client).next_user_id()


def test_user_repository_create_and_lookup(client):
    repo = FirestoreUserRepository(client)
    repo.create(1, "Alice A", "+15550001", "a@example.com")
    stored = client.data["users"]["1"]
    assert stored["userId"] == 1
    assert stored["fullName"] == "Alice A"
    assert stored["createdAt"] is firestore.SERVER_TIMESTAMP

    assert repo.get_by_phone("+15550001").user_id == 1
    assert repo.get_by_email("a@example.com").full_name == "Alice A"
    assert repo.get_by_phone("+15550002") is None


def test_user_repository_lookup_failure(client):
    client.unavailable = True
    with pytest.raises(StoreError):
        FirestoreUserRepository(client).get_by_phone("+15550001")


def test_verification_repository_overwrites_by_phone(client):
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    repo = FirestoreVerificationRepository(client, clock=lambda: now)
    repo.store_otp("+15550001", "111111")
    repo.store_otp("+15550001", "222222")

    docs = client.data["pendingVerifications"]
    assert list(docs) == ["+15550001"]
    assert docs["+15550001"]["otp"] == "222222"
    assert docs["+15550001"]["expiresAt"] == now + timedelta(minutes=10)
    assert docs["+15550001"]["createdAt"] is firestore.SERVER_TIMESTAMP

    record = repo.get("+15550001")
    assert record.otp == "222222"
    assert repo.get("+15550009") is None


def test_verification_repository_write_failure(client):
    client.unavailable = True
    with pytest.raises(StoreError) as exc:
        FirestoreVerificationRepository(client).store_otp("+15550001", "123456")
    assert exc.value.message == "Failed to store OTP"


def test_firestore_service_uses_configured_layout(client, no_transaction_wrapper):
    config = Settings(
        USERS_COLLECTION="members",
        PENDING_VERIFICATIONS_COLLECTION="otps",
        METADATA_COLLECTION="meta",
        USER_COUNTER_DOCUMENT="ids",
        OTP_EXPIRY_SECONDS=120,
        FIRESTORE_TRANSACTION_MAX_ATTEMPTS=9,
    )
    svc = build_firestore_auth_service(client, config)

    before = datetime.now(timezone.utc)
    registered = svc.register("+15550001", "Alice A", "a@example.com")
    logged_in = svc.login("+15550001")
    after = datetime.now(timezone.utc)

    assert registered.user_id == logged_in.user_id == 1
    assert client.data["members"]["1"]["phoneNumber"] == "+15550001"
    assert client.data["meta"]["ids"] == {"lastId": 1}
    assert [t.max_attempts for t in client.transactions] == [9]

    pending = client.data["otps"]["+15550001"]
    assert pending["otp"] == logged_in.otp
    assert before + timedelta(seconds=120) <= pending["expiresAt"] <= after + timedelta(seconds=120)
    assert set(client.data) == {"members", "meta", "otps"}
