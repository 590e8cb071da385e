"""
store.py
--------
MongoDB access for users and trash entries. Records leave this module as
plain dicts with a string "id" in place of Mongo's "_id"; ids that are not
valid ObjectIds are treated as "not found".
"""

import logging

from bson.objectid import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient

import config
from validation import EDITABLE_FIELDS

logger = logging.getLogger(__name__)


def _object_id(value):
    # ObjectId(None) would mint a fresh id
    if value is None:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _record(doc):
    if doc is None:
        return None
    record = dict(doc)
    record['id'] = str(record.pop('_id'))
    return record


class MongoStore:
    def __init__(self, db):
        self.db = db
        self.trash = db["trash"]
        self.users = db["users"]

    @classmethod
    def from_uri(cls, uri=None, db_name=None, timeout_ms=None):
        # connect=False defers the first connection until a query runs
        client = MongoClient(
            uri or config.MONGO_URI,
            serverSelectionTimeoutMS=timeout_ms or config.MONGO_TIMEOUT_MS,
            connect=False,
        )
        return cls(client[db_name or config.MONGO_DB_NAME])

    def ping(self):
        self.db.client.server_info()
        logger.info("Successfully connected to MongoDB")

    # ------------------------------------------------------------
    # Trash entries
    # ------------------------------------------------------------
    def find_entries_by_collector(self, name):
        return [_record(doc) for doc in self.trash.find({"collector": name})]

    def exists_by_collector(self, name):
        return self.trash.find_one({"collector": name}, {"_id": 1}) is not None

    def insert_entry(self, record):
        result = self.trash.insert_one(dict(record))
        logger.info("Inserted trash entry %s", result.inserted_id)
        return str(result.inserted_id)

    def get_entry(self, entry_id):
        oid = _object_id(entry_id)
        if oid is None:
            return None
        return _record(self.trash.find_one({"_id": oid}))

    def update_entry(self, entry_id, fields):
        oid = _object_id(entry_id)
        if oid is None:
            return
        changes = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        if changes:
            self.trash.update_one({"_id": oid}, {"$set": changes})
            logger.info("Updated trash entry %s", entry_id)

    def delete_entry(self, entry_id):
        oid = _object_id(entry_id)
        if oid is None:
            return
        self.trash.delete_one({"_id": oid})
        logger.info("Deleted trash entry %s", entry_id)

    def list_entries_for_user(self, user_id):
        return [_record(doc) for doc in self.trash.find({"userId": user_id})]

    def list_all_entries(self):
        return [_record(doc) for doc in self.trash.find()]

    # ------------------------------------------------------------
    # Users
    # ------------------------------------------------------------
    def find_user_by_email(self, email):
        return _record(self.users.find_one({"email": email}))

    def get_user(self, user_id):
        oid = _object_id(user_id)
        if oid is None:
            return None
        return _record(self.users.find_one({"_id": oid}))

    def insert_user(self, record):
        result = self.users.insert_one(dict(record))
        logger.info("Registered user %s", result.inserted_id)
        return str(result.inserted_id)
