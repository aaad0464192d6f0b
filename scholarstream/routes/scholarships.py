# scholarstream/routes/scholarships.py
from flask import Blueprint, request

from ..auth import require_admin
from ..db import to_public
from ..errors import BadRequest
from ..extensions import get_services
from ..schemas import ScholarshipCreate, ScholarshipQuery, ScholarshipUpdate
from .common import ok, parse_body, parse_query, public_list

bp = Blueprint("scholarships", __name__)


@bp.route("/add-scholarship", methods=["POST"])
@require_admin
def add_scholarship():
    data = parse_body(ScholarshipCreate)
    inserted_id = get_services().scholarships.create(data.model_dump())
    return ok({"insertedId": str(inserted_id)}, status=201, insertedId=str(inserted_id))


@bp.route("/scholarships/<scholarship_id>", methods=["PATCH"])
@require_admin
def update_scholarship(scholarship_id):
    fields = parse_body(ScholarshipUpdate).model_dump(exclude_unset=True)
    doc = get_services().scholarships.update(scholarship_id, fields)
    return ok(to_public(doc))


@bp.route("/scholarships/<scholarship_id>", methods=["DELETE"])
@require_admin
def delete_scholarship(scholarship_id):
    get_services().scholarships.delete(scholarship_id)
    return ok({"deleted": True})


@bp.route("/all-scholarships", methods=["GET"])
def all_scholarships():
    return ok(public_list(get_services().scholarships.list_all()))


@bp.route("/scholarships", methods=["GET"])
def search_scholarships():
    query = parse_query(ScholarshipQuery)
    return ok(public_list(get_services().scholarships.search(query)))


@bp.route("/latest-scholarships", methods=["GET"])
def latest_scholarships():
    limit = request.args.get("limit")
    if limit is not None:
        try:
            limit = int(limit)
        except ValueError:
            raise BadRequest("limit must be an integer")
    return ok(public_list(get_services().scholarships.latest(limit)))


@bp.route("/scholarship/<scholarship_id>", methods=["GET"])
@bp.route("/scholarship-details/<scholarship_id>", methods=["GET"])
def get_scholarship(scholarship_id):
    return ok(to_public(get_services().scholarships.get(scholarship_id)))
