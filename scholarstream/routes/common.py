# scholarstream/routes/common.py
from flask import jsonify, request

from ..auth import authenticate, principal_is_staff
from ..db import to_public
from ..errors import BadRequest, Forbidden


def ok(data=None, status=200, **extra):
    body = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status


def public_list(docs):
    return [to_public(doc) for doc in docs]


def json_body():
    """Request JSON as a dict; anything else is a bad request."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def parse_body(model):
    return model.model_validate(json_body())


def parse_query(model):
    return model.model_validate(request.args.to_dict())


def resolve_student_email():
    """
    Email whose records a "my-*" listing should return.

    Defaults to the principal; asking for someone else's records needs a
    staff role.
    """
    principal = authenticate()
    requested = request.args.get("email")
    if not requested or requested == principal:
        return principal
    if not principal_is_staff():
        raise Forbidden()
    return requested


def ensure_owner_or_staff(doc, field="studentEmail"):
    if doc.get(field) != authenticate() and not principal_is_staff():
        raise Forbidden()


def ensure_owner(doc, field="studentEmail"):
    if doc.get(field) != authenticate():
        raise Forbidden()
