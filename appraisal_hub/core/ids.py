import secrets
import uuid


def generate_id() -> str:
    return uuid.uuid4().hex


def generate_token(num_bytes: int = 16) -> str:
    """URL-safe opaque token for manual appraisal links."""
    return secrets.token_urlsafe(num_bytes)
