# scholarstream/routes/applications.py
from flask import Blueprint

from ..auth import authenticate, require_auth, require_staff
from ..db import to_public
from ..extensions import get_services
from ..schemas import ApplicationCreate, ApplicationStatusUpdate
from .common import ensure_owner_or_staff, json_body, ok, parse_body, public_list, resolve_student_email

bp = Blueprint("applications", __name__)


@bp.route("/apply-scholarships", methods=["POST"])
@require_auth
def apply_scholarship():
    payload = parse_body(ApplicationCreate).model_dump(exclude_none=True)
    inserted_id = get_services().applications.submit(authenticate(), payload)
    return ok({"insertedId": str(inserted_id)}, status=201, insertedId=str(inserted_id))


@bp.route("/my-applications", methods=["GET"])
@require_auth
def my_applications():
    email = resolve_student_email()
    return ok(public_list(get_services().applications.list_for_student(email)))


@bp.route("/my-applications/<application_id>", methods=["GET"])
@require_auth
def get_application(application_id):
    doc = get_services().applications.get(application_id)
    ensure_owner_or_staff(doc)
    return ok(to_public(doc))


@bp.route("/update-application/<application_id>", methods=["PATCH"])
@require_auth
def update_application(application_id):
    workflow = get_services().applications
    ensure_owner_or_staff(workflow.get(application_id))
    doc = workflow.update(application_id, json_body())
    return ok(to_public(doc))


@bp.route("/delete-application/<application_id>", methods=["DELETE"])
@require_auth
def delete_application(application_id):
    workflow = get_services().applications
    ensure_owner_or_staff(workflow.get(application_id))
    workflow.delete(application_id)
    return ok({"deleted": True})


@bp.route("/applications", methods=["GET"])
@require_staff
def list_applications():
    return ok(public_list(get_services().applications.list_all()))


@bp.route("/applications/<application_id>", methods=["PATCH"])
@require_staff
def update_application_status(application_id):
    body = parse_body(ApplicationStatusUpdate)
    doc = get_services().applications.set_status(application_id, body.status)
    return ok(to_public(doc))
