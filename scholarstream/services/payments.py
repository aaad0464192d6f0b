# scholarstream/services/payments.py
"""
Checkout initiation and payment completion.

The application document is the source of truth for "paid": completion flips
``paymentStatus`` from pending to paid with one conditional update, so a
replayed success redirect can never record a second payment. The ``payments``
collection is an append-only log written after that flip.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from urllib.parse import quote

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..db import parse_object_id
from ..domain.statuses import ApplicationStatus, PaymentStatus
from ..errors import BadRequest, Conflict, Forbidden, NotFound
from .tracking import generate_tracking_id

logger = logging.getLogger(__name__)

METADATA_KEY = "applicationId"


def to_cents(amount):
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    def __init__(self, store, gateway, site_domain, currency="usd", tracking_prefix="PRCL"):
        self.store = store
        self.gateway = gateway
        self.site_domain = (site_domain or "").rstrip("/")
        self.currency = currency
        self.tracking_prefix = tracking_prefix

    @property
    def applications(self):
        return self.store.applications

    @property
    def payments(self):
        return self.store.payments

    def _success_url(self, application_id):
        # {CHECKOUT_SESSION_ID} is substituted by Stripe
        return (
            f"{self.site_domain}/dashboard/payment-success"
            f"?session_id={{CHECKOUT_SESSION_ID}}&applicationId={quote(application_id)}"
        )

    def _cancel_url(self):
        return f"{self.site_domain}/dashboard/payment-cancelled"

    def initiate(self, application_id, principal_email, is_staff=False, amount=None, customer_email=None):
        """
        Open a hosted checkout session for a pending application.

        Nothing is written locally; the application only changes once
        :meth:`complete` sees a paid session.
        """
        application = self.applications.find_one({"_id": parse_object_id(application_id)})
        if not application:
            raise NotFound("Application not found")
        if application.get("studentEmail") != principal_email and not is_staff:
            raise Forbidden()
        if application.get("paymentStatus") != PaymentStatus.PENDING.value:
            raise BadRequest("Application is already paid")

        fees = application.get("applicationFees") or 0
        amount_cents = to_cents(fees)
        if amount_cents <= 0:
            raise BadRequest("This application has no fee to pay")
        if amount is not None and to_cents(amount) != amount_cents:
            raise BadRequest("Amount does not match the application fee")

        session = self.gateway.create_checkout_session(
            amount_cents=amount_cents,
            product_name=application.get("scholarshipName") or "Scholarship application fee",
            customer_email=customer_email or application.get("studentEmail"),
            success_url=self._success_url(application_id),
            cancel_url=self._cancel_url(),
            metadata={METADATA_KEY: application_id},
        )
        logger.info(
            "Checkout session opened",
            extra={"application_id": application_id, "session_id": session.id, "amount_cents": amount_cents},
        )
        return {"url": session.url, "sessionId": session.id}

    def complete(self, session_id, application_id=None):
        """
        Record a paid checkout session against its application.

        ``application_id`` may be omitted, in which case the id stored in
        the session metadata at initiation is used.
        """
        session = self.gateway.retrieve_session(session_id)
        session_application_id = session.metadata.get(METADATA_KEY)
        if application_id is None:
            application_id = session_application_id
        if not application_id or session_application_id != application_id:
            logger.warning(
                "Checkout session does not belong to application",
                extra={"session_id": session_id, "application_id": application_id},
            )
            raise BadRequest("Checkout session does not match this application")
        if not session.is_paid:
            logger.info(
                "Checkout session not paid",
                extra={"session_id": session_id, "payment_status": session.payment_status},
            )
            raise BadRequest("Payment not completed")

        oid = parse_object_id(application_id)
        now = datetime.now(timezone.utc)
        tracking_id = generate_tracking_id(self.tracking_prefix, now)
        application = self.applications.find_one_and_update(
            {"_id": oid, "paymentStatus": PaymentStatus.PENDING.value},
            {
                "$set": {
                    "paymentStatus": PaymentStatus.PAID.value,
                    "applicationStatus": ApplicationStatus.PROCESSING.value,
                    "trackingId": tracking_id,
                    "transactionId": session.payment_intent,
                    "paidAt": now,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if application is None:
            if self.applications.find_one({"_id": oid}, {"_id": 1}) is None:
                raise NotFound("Application not found")
            raise Conflict("Payment already recorded")

        self._record_payment(application, session, now)
        logger.info(
            "Payment completed",
            extra={"application_id": application_id, "tracking_id": tracking_id, "session_id": session_id},
        )
        return {
            "application": application,
            "trackingId": tracking_id,
            "transactionId": session.payment_intent,
        }

    def _record_payment(self, application, session, paid_at):
        record = {
            "applicationId": str(application["_id"]),
            "scholarshipId": application.get("scholarshipId"),
            "scholarshipName": application.get("scholarshipName"),
            "customerEmail": application.get("studentEmail"),
            "payerEmail": session.customer_email,
            "amount": (session.amount_total or 0) / 100,
            "currency": session.currency or self.currency,
            "transactionId": session.payment_intent,
            "sessionId": session.id,
            "paymentStatus": PaymentStatus.PAID.value,
            "trackingId": application.get("trackingId"),
            "paidAt": paid_at,
        }
        try:
            self.payments.insert_one(record)
        except DuplicateKeyError:
            logger.warning("Payment record already exists", extra={"application_id": record["applicationId"]})
        except PyMongoError:
            logger.error("Failed to write payment record", exc_info=True, extra={"application_id": record["applicationId"]})

    def list_for_customer(self, email):
        return list(self.payments.find({"customerEmail": email}).sort("paidAt", DESCENDING))
