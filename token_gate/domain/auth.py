from __future__ import annotations

__all__ = ["is_authorized"]

# ASGI servers hand headers over as bytes and Starlette decodes them as latin-1,
# so encoding back with latin-1 recovers exactly what was on the wire.
_WIRE_ENCODING = "latin-1"


def is_authorized(presented: str | None, secret: str) -> bool:
    """Compare the Authorization header verbatim against the secret.

    The comparison is on bytes: the header's wire bytes against the secret's
    UTF-8 encoding, so a non-ASCII token sent as UTF-8 matches itself.
    A missing header counts as empty, which never matches because an empty
    secret is rejected at startup. Plain equality, not constant-time.
    """
    try:
        raw = (presented or "").encode(_WIRE_ENCODING)
    except UnicodeEncodeError:
        # not representable as header bytes, so it cannot be the token
        return False
    return raw == secret.encode("utf-8")
