"""
Shared fixtures: in-memory MongoDB, fake identity provider and fake Stripe
"""
import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from main import app
from foodchef.config import Settings, get_settings
from foodchef.database import get_database
from foodchef.services.identity import TokenVerificationError, get_identity_provider
from foodchef.services.payment import PaymentGatewayError, get_payment_gateway


class FakeIdentityProvider:
    """Accepts only tokens it issued"""

    def __init__(self):
        self.tokens = {}

    def issue(self, email):
        token = f"token-{len(self.tokens)}"
        self.tokens[token] = {"uid": f"uid-{len(self.tokens)}", "email": email}
        return token

    async def verify_token(self, token):
        if token not in self.tokens:
            raise TokenVerificationError("invalid token")
        return self.tokens[token]


class FakeTransaction:
    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        self.session.in_transaction = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.session.in_transaction = False
        self.session.committed = exc_type is None
        return False


class FakeSession:
    def __init__(self):
        self.in_transaction = False
        self.committed = False

    def start_transaction(self):
        return FakeTransaction(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeMongoClient:
    def __init__(self):
        self.sessions = []

    async def start_session(self):
        session = FakeSession()
        self.sessions.append(session)
        return session


class InstrumentedCollection:
    """Records writes and can raise a queued error instead of running one"""

    def __init__(self, collection, name, store):
        self._collection = collection
        self._name = name
        self._store = store

    def __getattr__(self, attr):
        return getattr(self._collection, attr)

    async def insert_one(self, document, session=None, **kwargs):
        return await self._call("insert_one", session, document, **kwargs)

    async def update_one(self, filter, update, session=None, **kwargs):
        return await self._call("update_one", session, filter, update, **kwargs)

    async def create_index(self, keys, **kwargs):
        return await self._call("create_index", None, keys, **kwargs)

    async def _call(self, op, session, *args, **kwargs):
        active = session.in_transaction if session is not None else False
        self._store.calls.append((self._name, op, session, active))
        error = self._store.failures.pop((self._name, op), None)
        if error is not None:
            raise error
        return await getattr(self._collection, op)(*args, **kwargs)


class InstrumentedDatabase:
    """Wraps the in-memory database with a session-capable client"""

    def __init__(self, db):
        self._db = db
        self.client = FakeMongoClient()
        self.calls = []
        self.failures = {}

    def __getitem__(self, name):
        return InstrumentedCollection(self._db[name], name, self)


class FakePaymentGateway:
    def __init__(self):
        self.amounts = []
        self.error = None

    async def create_payment_intent(self, amount):
        if self.error:
            raise PaymentGatewayError(self.error)
        self.amounts.append(amount)
        return f"pi_{len(self.amounts)}_secret_test"


@pytest.fixture
def db():
    return AsyncMongoMockClient()["foodchef_test"]


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def client(db, identity, gateway):
    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_settings] = lambda: Settings(MONGODB_TRANSACTIONS=False)

    # Lifespan is not entered, so no real MongoDB connection is made
    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(identity):
    """Build Authorization headers for a given email"""
    def _headers(email="diner@foodchef.io"):
        return {"Authorization": f"Bearer {identity.issue(email)}"}
    return _headers


@pytest.fixture
def store(client, db):
    """Route handlers through an instrumented wrapper of ``db``"""
    instrumented = InstrumentedDatabase(db)
    app.dependency_overrides[get_database] = lambda: instrumented
    return instrumented
