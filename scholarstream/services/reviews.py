# scholarstream/services/reviews.py
import logging
from datetime import datetime, timezone

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db import check_field_names, parse_object_id
from ..errors import Conflict, NotFound

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = frozenset({"_id", "id", "scholarshipId", "scholarshipName", "studentEmail", "createdAt"})


def strip_identity(fields):
    check_field_names(fields)
    return {k: v for k, v in fields.items() if k not in IDENTITY_FIELDS}


class ReviewWorkflow:
    def __init__(self, store, catalog):
        self.store = store
        self.catalog = catalog

    @property
    def collection(self):
        return self.store.reviews

    def submit(self, student_email, payload):
        scholarship = self.catalog.get(payload["scholarshipId"])
        now = datetime.now(timezone.utc)
        document = {
            **strip_identity(payload),
            "scholarshipId": str(scholarship["_id"]),
            "scholarshipName": scholarship.get("scholarshipName"),
            "studentEmail": student_email,
            "reviewDate": now,
            "createdAt": now,
        }
        try:
            result = self.collection.insert_one(document)
        except DuplicateKeyError:
            raise Conflict("You have already submitted a review for this scholarship")
        logger.info("Review submitted", extra={"review_id": str(result.inserted_id)})
        return result.inserted_id

    def list_for_student(self, student_email):
        return list(self.collection.find({"studentEmail": student_email}).sort("reviewDate", DESCENDING))

    def list_all(self):
        return list(self.collection.find().sort("createdAt", DESCENDING))

    def list_for_scholarship(self, scholarship_name):
        return list(self.collection.find({"scholarshipName": scholarship_name}).sort("createdAt", DESCENDING))

    def get(self, review_id):
        doc = self.collection.find_one({"_id": parse_object_id(review_id)})
        if not doc:
            raise NotFound("Review not found")
        return doc

    def update(self, review_id, fields):
        fields = strip_identity(fields)
        if not fields:
            return self.get(review_id)
        fields["reviewDate"] = datetime.now(timezone.utc)
        doc = self.collection.find_one_and_update(
            {"_id": parse_object_id(review_id)}, {"$set": fields}, return_document=ReturnDocument.AFTER
        )
        if not doc:
            raise NotFound("Review not found")
        return doc

    def delete(self, review_id):
        result = self.collection.delete_one({"_id": parse_object_id(review_id)})
        if result.deleted_count == 0:
            raise NotFound("Review not found")
        logger.info("Review deleted", extra={"review_id": review_id})
