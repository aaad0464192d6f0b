# scholarstream/db/store.py
"""
Document store access.

A single Store wraps one pymongo Database for the process lifetime and is
handed to every service. Collection names match the ones the web client
and existing data use.
"""

import logging
from datetime import date, datetime

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, MongoClient
from pymongo.server_api import ServerApi

from ..errors import BadRequest

logger = logging.getLogger(__name__)

USERS = "users"
SCHOLARSHIPS = "scholarships"
APPLICATIONS = "applications"
REVIEWS = "reviews"
PAYMENTS = "payments"

# (collection, keys, index name)
UNIQUE_INDEXES = (
    (USERS, [("email", ASCENDING)], "uniq_user_email"),
    (APPLICATIONS, [("scholarshipId", ASCENDING), ("studentEmail", ASCENDING)], "uniq_application_per_student"),
    (REVIEWS, [("scholarshipId", ASCENDING), ("studentEmail", ASCENDING)], "uniq_review_per_student"),
    (PAYMENTS, [("applicationId", ASCENDING)], "uniq_payment_per_application"),
)


class Store:
    def __init__(self, database, client=None):
        self.db = database
        self.client = client

    @classmethod
    def from_config(cls, config):
        client = MongoClient(
            config["MONGO_URI"],
            server_api=ServerApi("1"),
            serverSelectionTimeoutMS=config.get("MONGO_SERVER_SELECTION_TIMEOUT_MS", 5000),
            tz_aware=True,
        )
        return cls(client[config["MONGO_DB_NAME"]], client=client)

    @property
    def users(self):
        return self.db[USERS]

    @property
    def scholarships(self):
        return self.db[SCHOLARSHIPS]

    @property
    def applications(self):
        return self.db[APPLICATIONS]

    @property
    def reviews(self):
        return self.db[REVIEWS]

    @property
    def payments(self):
        return self.db[PAYMENTS]

    def ensure_indexes(self):
        """Create the unique indexes the duplicate guards rely on."""
        created = []
        for collection, keys, name in UNIQUE_INDEXES:
            self.db[collection].create_index(keys, name=name, unique=True)
            created.append(name)
        logger.info("Unique indexes ensured", extra={"indexes": created})
        return created

    def ping(self):
        self.db.command("ping")

    def close(self):
        if self.client is not None:
            self.client.close()


def parse_object_id(value):
    """Convert a path/body identifier into an ObjectId or reject the request."""
    if isinstance(value, ObjectId):
        return value
    # ObjectId(None) would mint a fresh id
    if not isinstance(value, str):
        raise BadRequest(f"Invalid identifier: {value!r}")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise BadRequest(f"Invalid identifier: {value!r}")


def check_field_names(fields):
    """Reject top-level keys that MongoDB would read as paths or operators."""
    for key in fields:
        if not isinstance(key, str) or not key or "." in key or key.startswith("$"):
            raise BadRequest(f"Invalid field name: {key!r}")
    return fields


def _jsonable(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def to_public(doc):
    """Serialize a stored document for a JSON response (``_id`` becomes ``id``)."""
    if not doc:
        return doc
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return _jsonable(doc)
