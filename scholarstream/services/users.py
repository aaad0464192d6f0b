# scholarstream/services/users.py
import logging
from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db import parse_object_id
from ..domain.roles import Role
from ..errors import NotFound

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, store):
        self.store = store

    @property
    def collection(self):
        return self.store.users

    def create(self, email, profile):
        """
        Create the user record on first sign-in.

        Returns ``(document, created)``. Repeated sign-ins hit the unique
        email and leave the existing document untouched.
        """
        now = datetime.now(timezone.utc)
        fields = {k: v for k, v in profile.items() if v is not None}
        try:
            result = self.collection.update_one(
                {"email": email},
                {"$setOnInsert": {**fields, "email": email, "role": Role.STUDENT.value, "createdAt": now}},
                upsert=True,
            )
            created = result.upserted_id is not None
        except DuplicateKeyError:
            # lost a concurrent first sign-in race; the other insert won
            created = False
        if created:
            logger.info("User created", extra={"email": email})
        return self.collection.find_one({"email": email}), created

    def get_by_email(self, email):
        return self.collection.find_one({"email": email})

    def stored_role(self, email):
        """Role stored for ``email``; None when there is no user or the role is unknown."""
        user = self.collection.find_one({"email": email}, {"role": 1})
        if not user:
            return None
        role = Role.parse(user.get("role"))
        if role is None:
            logger.warning("Unknown stored role", extra={"email": email, "role": user.get("role")})
        return role

    def get_role(self, email):
        return self.stored_role(email) or Role.STUDENT

    def list_all(self):
        return list(self.collection.find().sort("createdAt", -1))

    def set_role(self, user_id, role):
        role = Role(role)
        user = self.collection.find_one_and_update(
            {"_id": parse_object_id(user_id)},
            {"$set": {"role": role.value}},
            return_document=ReturnDocument.AFTER,
        )
        if not user:
            raise NotFound("User not found")
        logger.info("User role changed", extra={"user_id": user_id, "role": role.value})
        return user

    def update_profile(self, email, fields):
        if fields:
            found = self.collection.update_one({"email": email}, {"$set": fields}).matched_count > 0
        else:
            found = self.collection.find_one({"email": email}, {"_id": 1}) is not None
        if not found:
            raise NotFound("User not found")
        return fields

    def delete(self, user_id):
        result = self.collection.delete_one({"_id": parse_object_id(user_id)})
        if result.deleted_count == 0:
            raise NotFound("User not found")
        logger.info("User deleted", extra={"user_id": user_id})
