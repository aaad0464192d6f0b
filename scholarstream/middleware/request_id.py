import re
import uuid

from flask import g, request

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids end up in every log line, so only short tokens are trusted
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(incoming):
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


def init_request_id_middleware(app):
    """
    Attach a correlation id to every request and echo it back in the
    response headers.
    """

    @app.before_request
    def assign_request_id():
        g.request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

    @app.after_request
    def add_request_id_header(response):
        response.headers[REQUEST_ID_HEADER] = g.get("request_id", "")
        return response
