# scholarstream/routes/users.py
from flask import Blueprint, jsonify

from ..auth import authenticate, require_admin, require_auth
from ..db import to_public
from ..extensions import get_services
from ..schemas import ProfileUpdate, RoleUpdate, UserCreate
from .common import ok, parse_body, public_list

bp = Blueprint("users", __name__)


@bp.route("/users", methods=["POST"])
@require_auth
def create_user():
    """Register the signed-in user; repeated calls return the existing record."""
    profile = parse_body(UserCreate)
    user, created = get_services().users.create(authenticate(), profile.model_dump())
    return ok(to_public(user), status=201 if created else 200, created=created)


@bp.route("/users", methods=["GET"])
@require_admin
def list_users():
    return ok(public_list(get_services().users.list_all()))


@bp.route("/users/<email>", methods=["GET"])
def get_user(email):
    # Bare document (or null) for the web client's profile lookup
    return jsonify(to_public(get_services().users.get_by_email(email)))


@bp.route("/users/<email>/role", methods=["GET"])
@require_auth
def get_user_role(email):
    role = get_services().users.get_role(email)
    return ok({"role": role.value})


@bp.route("/users/<user_id>/role", methods=["PATCH"])
@require_admin
def update_user_role(user_id):
    body = parse_body(RoleUpdate)
    user = get_services().users.set_role(user_id, body.role)
    return ok(to_public(user))


@bp.route("/users/update", methods=["PATCH"])
@require_auth
def update_profile():
    fields = parse_body(ProfileUpdate).provided_fields()
    updated = get_services().users.update_profile(authenticate(), fields)
    return ok(updated, updatedFields=updated)


@bp.route("/users/<user_id>", methods=["DELETE"])
@require_admin
def delete_user(user_id):
    get_services().users.delete(user_id)
    return ok({"deleted": True})
