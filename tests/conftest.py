import pytest
from bson.objectid import ObjectId

from application import application
from auth import hash_password
from models import new_user_document
from validation import EDITABLE_FIELDS

SCHOOL_EMAIL = "202311512@gordoncollege.edu.ph"
OTHER_EMAIL = "202399999@gordoncollege.edu.ph"
PASSWORD = "secret123"


class InMemoryStore:
    """Same interface as store.MongoStore, backed by dicts."""

    def __init__(self):
        self.trash = {}
        self.users = {}

    @staticmethod
    def _new_id():
        return str(ObjectId())

    def exists_by_collector(self, name):
        return any(r.get("collector") == name for r in self.trash.values())

    def insert_entry(self, record):
        entry_id = self._new_id()
        self.trash[entry_id] = dict(record, id=entry_id)
        return entry_id

    def get_entry(self, entry_id):
        record = self.trash.get(entry_id)
        return dict(record) if record else None

    def update_entry(self, entry_id, fields):
        if entry_id in self.trash:
            self.trash[entry_id].update({k: v for k, v in fields.items() if k in EDITABLE_FIELDS})

    def delete_entry(self, entry_id):
        self.trash.pop(entry_id, None)

    def list_entries_for_user(self, user_id):
        return [dict(r) for r in self.trash.values() if r.get("userId") == user_id]

    def list_all_entries(self):
        return [dict(r) for r in self.trash.values()]

    def find_user_by_email(self, email):
        for user in self.users.values():
            if user.get("email") == email:
                return dict(user)
        return None

    def get_user(self, user_id):
        user = self.users.get(user_id)
        return dict(user) if user else None

    def insert_user(self, record):
        user_id = self._new_id()
        self.users[user_id] = dict(record, id=user_id)
        return user_id


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def app(store):
    saved = dict(application.config)
    application.config.update(
        STORE=store,
        TESTING=True,
        STRICT_MODE=True,
        INSTITUTION_EMAIL_DOMAIN="gordoncollege.edu.ph",
        LEADERBOARD_API_LIMIT=10,
    )
    yield application
    application.config.clear()
    application.config.update(saved)


@pytest.fixture
def client(app):
    return app.test_client()


def add_user(store, email=SCHOOL_EMAIL, password=PASSWORD, name="Juan Dela Cruz", department="CCS"):
    account = {"name": name, "email": email, "department": department}
    return store.insert_user(new_user_document(account, hash_password(password)))


def log_in(client, email=SCHOOL_EMAIL, password=PASSWORD):
    return client.post("/login", data={"email": email, "password": password})


@pytest.fixture
def user_id(store):
    return add_user(store)


@pytest.fixture
def logged_in(client, user_id):
    log_in(client)
    return client
