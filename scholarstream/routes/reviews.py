# scholarstream/routes/reviews.py
from flask import Blueprint

from ..auth import authenticate, require_auth, require_moderator
from ..db import to_public
from ..extensions import get_services
from ..schemas import ReviewCreate, ReviewUpdate
from .common import ensure_owner, ok, parse_body, public_list, resolve_student_email

bp = Blueprint("reviews", __name__)


@bp.route("/add-review", methods=["POST"])
@require_auth
def add_review():
    payload = parse_body(ReviewCreate).model_dump(exclude_none=True)
    review_id = get_services().reviews.submit(authenticate(), payload)
    return ok({"reviewId": str(review_id)}, status=201, reviewId=str(review_id))


@bp.route("/my-reviews", methods=["GET"])
@require_auth
def my_reviews():
    email = resolve_student_email()
    return ok(public_list(get_services().reviews.list_for_student(email)))


@bp.route("/update-review/<review_id>", methods=["PATCH"])
@require_auth
def update_review(review_id):
    workflow = get_services().reviews
    ensure_owner(workflow.get(review_id))
    fields = parse_body(ReviewUpdate).model_dump(exclude_unset=True)
    return ok(to_public(workflow.update(review_id, fields)))


@bp.route("/delete-review/<review_id>", methods=["DELETE"])
@require_auth
def delete_own_review(review_id):
    workflow = get_services().reviews
    ensure_owner(workflow.get(review_id))
    workflow.delete(review_id)
    return ok({"deleted": True})


@bp.route("/reviews", methods=["GET"])
@require_moderator
def list_reviews():
    return ok(public_list(get_services().reviews.list_all()))


@bp.route("/reviews/<review_id>", methods=["DELETE"])
@require_moderator
def delete_review(review_id):
    get_services().reviews.delete(review_id)
    return ok({"deleted": True})


@bp.route("/reviews/<scholarship_name>", methods=["GET"])
def reviews_for_scholarship(scholarship_name):
    return ok(public_list(get_services().reviews.list_for_scholarship(scholarship_name)))
