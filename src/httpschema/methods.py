"""The fixed set of HTTP methods a schema may declare."""

METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


def is_method(token: str) -> bool:
    """True if *token* is a supported method. Matching is case-sensitive."""
    return token in METHODS
