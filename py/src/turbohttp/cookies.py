from __future__ import annotations

import hashlib
import hmac

from turbohttp.secret_store import Secret, secret_bytes

SIGNED_PREFIX = "s:"


def parse_cookies(header: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for part in str(header or "").split(";"):
        trimmed = part.strip()
        if not trimmed:
            continue
        if "=" not in trimmed:
            continue
        name, value = trimmed.split("=", 1)
        name = name.strip()
        if not name:
            continue
        out[name] = value.strip()
    return out


def _hmac_hex(secret: Secret, value: str) -> str:
    return hmac.new(secret_bytes(secret), str(value).encode("utf-8"), hashlib.sha256).hexdigest()


def sign_cookie(value: str, secret: Secret) -> str:
    value = str(value)
    return f"{SIGNED_PREFIX}{value}.{_hmac_hex(secret, value)}"


def unsign_cookie(signed_value: str, secret: Secret) -> str | None:
    """Return the original value when the signature checks out, else ``None``.

    The tag is split off at the last ``.``: a hex digest never contains one,
    so values that themselves contain dots still round-trip. Input without
    the ``s:`` prefix is never treated as signed and returns ``None``.
    """
    raw = str(signed_value or "")
    if not raw.startswith(SIGNED_PREFIX):
        return None
    value, sep, supplied = raw[len(SIGNED_PREFIX) :].rpartition(".")
    if not sep or not supplied:
        return None
    expected = _hmac_hex(secret, value).encode("ascii")
    if hmac.compare_digest(expected, supplied.encode("utf-8", errors="replace")):
        return value
    return None


def is_signed(value: str) -> bool:
    return str(value or "").startswith(SIGNED_PREFIX)
