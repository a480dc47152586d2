"""Shared fixtures: an in-memory stand-in for the Mongo collections and a Flask client."""
import pytest
from bson import ObjectId
from flask_jwt_extended import create_access_token

from billsplit import create_app
from billsplit.config import TestConfig
from billsplit import extensions


def _matches(doc, query):
    for key, expected in query.items():
        actual = doc.get(key)
        if isinstance(expected, dict) and "$in" in expected:
            if actual not in expected["$in"]:
                return False
        elif actual != expected:
            return False
    return True


class FakeCollection:
    """Supports the equality and $in lookups the settlement service issues."""

    def __init__(self):
        self.docs = []

    def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return doc

    def find(self, query=None):
        return [d for d in self.docs if _matches(d, query or {})]

    def find_one(self, query=None):
        found = self.find(query)
        return found[0] if found else None


class FakeDB:
    def __init__(self):
        self.events = FakeCollection()
        self.participants = FakeCollection()
        self.expenses = FakeCollection()

    def __getitem__(self, name):
        return getattr(self, name)


@pytest.fixture
def fake_db():
    previous = extensions.get_db()
    db = FakeDB()
    extensions.set_db(db)
    yield db
    extensions.set_db(previous)


@pytest.fixture
def app(fake_db):
    app = create_app(TestConfig)
    # create_app points the proxy at a real (lazy) client; put the fake back
    extensions.set_db(fake_db)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _headers(user_id):
        with app.app_context():
            token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def trip(fake_db):
    """
    Event created by alice with bob and carol as active participants, dave
    inactive, and two equal expenses: alice paid 90, bob paid 30.
    """
    alice, bob, carol, dave = ObjectId(), ObjectId(), ObjectId(), ObjectId()
    event = fake_db.events.insert_one({"name": "Lake trip", "creator_id": alice})
    for user, status in ((bob, "active"), (carol, "active"), (dave, "inactive")):
        fake_db.participants.insert_one({
            "event_id": event["_id"], "user_id": user, "status": status
        })
    fake_db.expenses.insert_one({
        "event_id": event["_id"], "payer_id": alice, "amount": 90.0, "split_type": "equal"
    })
    fake_db.expenses.insert_one({
        "event_id": event["_id"], "payer_id": bob, "amount": 30.0
    })
    return {
        "event": event,
        "alice": str(alice),
        "bob": str(bob),
        "carol": str(carol),
        "dave": str(dave),
    }
