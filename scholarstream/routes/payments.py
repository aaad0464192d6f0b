# scholarstream/routes/payments.py
from flask import Blueprint, request

from ..auth import authenticate, principal_is_staff, require_auth
from ..db import to_public
from ..errors import BadRequest
from ..extensions import get_services
from ..schemas import CheckoutRequest, CompletionRequest
from .common import json_body, ok, parse_body, public_list

bp = Blueprint("payments", __name__)


@bp.route("/payments/init", methods=["POST"])
@bp.route("/payment-checkout-session", methods=["POST"])
@require_auth
def init_payment():
    body = parse_body(CheckoutRequest)
    result = get_services().payments.initiate(
        body.applicationId,
        authenticate(),
        is_staff=principal_is_staff(),
        amount=body.amount,
        customer_email=body.userEmail,
    )
    return ok(result, url=result["url"])


def _session_id():
    session_id = request.args.get("session_id") or json_body().get("sessionId")
    if not session_id:
        raise BadRequest("sessionId is required")
    return CompletionRequest(sessionId=session_id).sessionId


@bp.route("/payments/complete/<application_id>", methods=["PATCH"])
@require_auth
def complete_payment(application_id):
    result = get_services().payments.complete(_session_id(), application_id)
    return ok(_completion_payload(result))


@bp.route("/payment-success", methods=["PATCH"])
@require_auth
def payment_success():
    result = get_services().payments.complete(_session_id())
    return ok(_completion_payload(result))


def _completion_payload(result):
    return {
        "application": to_public(result["application"]),
        "trackingId": result["trackingId"],
        "transactionId": result["transactionId"],
    }


@bp.route("/my-payments", methods=["GET"])
@require_auth
def my_payments():
    return ok(public_list(get_services().payments.list_for_customer(authenticate())))
