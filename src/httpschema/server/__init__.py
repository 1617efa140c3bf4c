"""Server side — validate requests against an HttpSchema before dispatch."""

from httpschema.server.handler import RequestHandler, create_request_handler
from httpschema.server.router import SchemaRouter

__all__ = ["RequestHandler", "SchemaRouter", "create_request_handler"]
