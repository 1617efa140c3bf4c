"""Content negotiation: maps handler return values to Response objects.

JSON only. Dispatch is by shape and type of the returned value.
"""

from typing import Any

from httpschema.http.response import Response, json_response


def negotiate(value: Any) -> Response:
    """Convert a handler's (or error channel's) return value to a Response.

    Dispatch order:

    1. ``Response``              -> pass through
    2. ``(value, int)`` tuple    -> negotiate value, override status
    3. ``(value, int, dict)``    -> same, plus extra headers
    4. anything else             -> 200, application/json
    """
    match value:
        case Response():
            return value
        case (inner, int() as status) if isinstance(value, tuple):
            return negotiate(inner).with_status(status)
        case (inner, int() as status, dict() as headers) if isinstance(value, tuple):
            return negotiate(inner).with_status(status).with_headers(headers)
        case _:
            return json_response(value)
