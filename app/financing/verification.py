"""
Callback verification for the financing provider.

The provider signs each callback with a SHA-512 digest over the partner
secret and the callback fields joined by semicolons:

    sha512("<secret>;<status>;<referenceId>;<usage>")

The construction is unkeyed (not an HMAC) and is kept as-is because the
provider computes it this way. Missing fields take part as empty strings.

Usage:
    from financing.verification import verify_callback

    if not verify_callback(config.secret_key, status, reference_id, usage, claimed):
        raise CallbackVerificationError("Callback verification failed")
"""

from __future__ import annotations

import hashlib
import hmac
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


def _field(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"Callback field must be a string, got {type(value).__name__}")
    return value


def generate_verification_hash(
    secret: str,
    status: str | None,
    reference_id: str | None,
    usage: str | None,
) -> str:
    """
    Compute the expected verification hash.

    Args:
        secret: Partner secret key
        status: Callback status (None becomes "")
        reference_id: Provider reference id (None becomes "")
        usage: Usage token (None becomes "")

    Returns:
        Lowercase hex SHA-512 digest (128 characters)

    Raises:
        TypeError: A field is neither a string nor None
    """
    message = ";".join(
        [_field(secret), _field(status), _field(reference_id), _field(usage)]
    )
    return hashlib.sha512(message.encode("utf-8")).hexdigest()


def verify_callback(
    secret: str,
    status: Any,
    reference_id: Any,
    usage: Any,
    claimed_hash: Any,
) -> bool:
    """
    Check a callback's claimed hash against the expected one.

    Never raises: non-string fields or hashes verify as False.
    """
    if not isinstance(claimed_hash, str) or not claimed_hash:
        return False

    try:
        expected = generate_verification_hash(secret, status, reference_id, usage)
    except TypeError:
        return False

    return hmac.compare_digest(expected.encode("utf-8"), claimed_hash.encode("utf-8"))
