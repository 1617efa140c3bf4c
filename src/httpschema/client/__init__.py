"""Client side — typed calls against an HttpSchema over httpx."""

from httpschema.client.http_client import HttpClient, decode_body

__all__ = ["HttpClient", "decode_body"]
