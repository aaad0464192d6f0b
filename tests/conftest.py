import itertools
from datetime import datetime, timezone

import mongomock
import pytest
from faker import Faker

from scholarstream import create_app
from scholarstream.auth.identity import IdentityVerificationError, IdentityVerifier
from scholarstream.db import Store
from scholarstream.domain.roles import Role
from scholarstream.services import CheckoutSession

# Initialize Faker for generating test data
fake = Faker()

TOKEN_PREFIX = "valid-token:"


def pytest_configure(config):
    config.addinivalue_line("markers", "auth: mark test as authentication-related")
    config.addinivalue_line("markers", "payment: mark test as payment-related")
    config.addinivalue_line("markers", "db: mark test as database-intensive")


class FakeIdentityVerifier(IdentityVerifier):
    """Accepts ``valid-token:<email>`` and rejects everything else."""

    def __init__(self):
        self.calls = []

    def verify(self, token):
        self.calls.append(token)
        if not token.startswith(TOKEN_PREFIX):
            raise IdentityVerificationError("invalid token")
        return token[len(TOKEN_PREFIX):]


class FakePaymentGateway:
    """In-memory stand-in for Stripe Checkout."""

    def __init__(self):
        self.sessions = {}
        self.created = []
        self._ids = itertools.count(1)

    def create_checkout_session(self, *, amount_cents, product_name, customer_email,
                                success_url, cancel_url, metadata=None):
        session_id = f"cs_test_{next(self._ids)}"
        session = CheckoutSession(
            id=session_id,
            url=f"https://checkout.stripe.test/{session_id}",
            payment_status="unpaid",
            amount_total=amount_cents,
            currency="usd",
            customer_email=customer_email,
            metadata=dict(metadata or {}),
        )
        self.sessions[session_id] = session
        self.created.append({
            "amount_cents": amount_cents,
            "product_name": product_name,
            "customer_email": customer_email,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": dict(metadata or {}),
        })
        return session

    def retrieve_session(self, session_id):
        return self.sessions[session_id]

    def mark_paid(self, session_id, payment_intent="pi_test_123"):
        session = self.sessions[session_id]
        session.payment_status = "paid"
        session.payment_intent = payment_intent
        return session


@pytest.fixture()
def store():
    client = mongomock.MongoClient()
    return Store(client["scholarStreamTestDB"], client=client)


@pytest.fixture()
def identity():
    return FakeIdentityVerifier()


@pytest.fixture()
def gateway():
    return FakePaymentGateway()


@pytest.fixture()
def app(store, identity, gateway):
    """Create application for testing with in-memory collaborators"""
    app = create_app("testing", store=store, identity_verifier=identity, payment_gateway=gateway)
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


def auth_headers(email):
    return {"Authorization": f"Bearer {TOKEN_PREFIX}{email}"}


@pytest.fixture()
def make_user(store):
    """Insert a user with the given role directly into the store."""
    def _make_user(email=None, role=Role.STUDENT, **fields):
        email = email or fake.unique.email()
        doc = {
            "email": email,
            "name": fake.name(),
            "role": role.value if isinstance(role, Role) else role,
            "createdAt": datetime.now(timezone.utc),
            **fields,
        }
        doc["_id"] = store.users.insert_one(doc).inserted_id
        return doc
    return _make_user


@pytest.fixture()
def student(make_user):
    return make_user(role=Role.STUDENT)


@pytest.fixture()
def admin(make_user):
    return make_user(role=Role.ADMIN)


@pytest.fixture()
def moderator(make_user):
    return make_user(role=Role.MODERATOR)


@pytest.fixture()
def make_scholarship(store):
    def _make_scholarship(**overrides):
        doc = {
            "scholarshipName": f"{fake.last_name()} Merit Scholarship",
            "universityName": f"University of {fake.city()}",
            "subjectCategory": "Engineering",
            "scholarshipCategory": "Full fund",
            "degree": "Bachelor",
            "applicationFees": 25.0,
            "postDate": datetime.now(timezone.utc),
        }
        doc.update(overrides)
        doc["_id"] = store.scholarships.insert_one(doc).inserted_id
        return doc
    return _make_scholarship


@pytest.fixture()
def scholarship(make_scholarship):
    return make_scholarship()


@pytest.fixture()
def make_application(client):
    """Submit an application through the API and return its id."""
    def _make_application(email, scholarship_id, **fields):
        resp = client.post(
            "/apply-scholarships",
            json={"scholarshipId": str(scholarship_id), "phone": fake.phone_number(), **fields},
            headers=auth_headers(email),
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["insertedId"]
    return _make_application


@pytest.fixture()
def auth():
    return auth_headers
