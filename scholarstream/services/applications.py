# scholarstream/services/applications.py
import logging
from datetime import datetime, timezone

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db import check_field_names, parse_object_id
from ..domain.statuses import ApplicationStatus, PaymentStatus
from ..errors import Conflict, NotFound

logger = logging.getLogger(__name__)

# Fields a student edit may never touch; payment/tracking data is only
# written by the payment completion flow, status only by staff, and the
# scholarship snapshot (checkout charges its fee) only at submission.
PROTECTED_FIELDS = frozenset({
    "_id",
    "id",
    "scholarshipId",
    "scholarshipName",
    "universityName",
    "applicationFees",
    "studentEmail",
    "applicationStatus",
    "paymentStatus",
    "trackingId",
    "transactionId",
    "paidAt",
    "appliedAt",
})


def strip_protected(fields):
    check_field_names(fields)
    return {k: v for k, v in fields.items() if k not in PROTECTED_FIELDS}


class ApplicationWorkflow:
    def __init__(self, store, catalog):
        self.store = store
        self.catalog = catalog

    @property
    def collection(self):
        return self.store.applications

    def submit(self, student_email, payload):
        """
        Store a new application for ``student_email``.

        The (scholarshipId, studentEmail) unique index turns a second
        submission into a Conflict.
        """
        scholarship = self.catalog.get(payload["scholarshipId"])
        document = {
            **strip_protected(payload),
            "scholarshipId": str(scholarship["_id"]),
            "scholarshipName": scholarship.get("scholarshipName"),
            "universityName": scholarship.get("universityName"),
            "applicationFees": scholarship.get("applicationFees", 0),
            "studentEmail": student_email,
            "applicationStatus": ApplicationStatus.PENDING.value,
            "paymentStatus": PaymentStatus.PENDING.value,
            "trackingId": None,
            "transactionId": None,
            "paidAt": None,
            "appliedAt": datetime.now(timezone.utc),
        }
        try:
            result = self.collection.insert_one(document)
        except DuplicateKeyError:
            raise Conflict("Already applied!")
        logger.info(
            "Application submitted",
            extra={"application_id": str(result.inserted_id), "scholarship_id": document["scholarshipId"]},
        )
        return result.inserted_id

    def list_for_student(self, student_email):
        return list(self.collection.find({"studentEmail": student_email}).sort("appliedAt", DESCENDING))

    def list_all(self):
        return list(self.collection.find().sort("appliedAt", DESCENDING))

    def get(self, application_id):
        doc = self.collection.find_one({"_id": parse_object_id(application_id)})
        if not doc:
            raise NotFound("Application not found")
        return doc

    def update(self, application_id, fields):
        fields = strip_protected(fields)
        oid = parse_object_id(application_id)
        if not fields:
            return self.get(application_id)
        doc = self.collection.find_one_and_update(
            {"_id": oid}, {"$set": fields}, return_document=ReturnDocument.AFTER
        )
        if not doc:
            raise NotFound("Application not found")
        return doc

    def set_status(self, application_id, status):
        status = ApplicationStatus(status)
        doc = self.collection.find_one_and_update(
            {"_id": parse_object_id(application_id)},
            {"$set": {"applicationStatus": status.value}},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFound("Application not found")
        logger.info("Application status changed", extra={"application_id": application_id, "status": status.value})
        return doc

    def delete(self, application_id):
        result = self.collection.delete_one({"_id": parse_object_id(application_id)})
        if result.deleted_count == 0:
            raise NotFound("Application not found")
        logger.info("Application deleted", extra={"application_id": application_id})
