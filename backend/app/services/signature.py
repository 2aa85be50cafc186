import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Webhook-Signature"


def compute_signature(payload: bytes | str, secret: str) -> str:
    """Hex-encoded HMAC-SHA256 of the raw payload."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify(payload: bytes | str | None, signature: str | None, secret: str | None) -> bool:
    """
    Return True if signature is the HMAC of payload under secret.

    The signature comes straight from a request header, so anything odd
    about it (wrong type, non-ASCII characters) counts as a mismatch.
    """
    if not payload or not signature or not secret:
        return False

    expected = compute_signature(payload, secret)
    try:
        return hmac.compare_digest(expected, signature)
    except TypeError:
        logger.debug("Signature could not be compared")
        return False
