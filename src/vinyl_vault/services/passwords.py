"""Password hashing with scrypt."""

import hashlib
import hmac
import secrets

_SALT_BYTES = 16
_KEY_LENGTH = 64
_SCRYPT_N = 16384
_SCRYPT_R = 8
_SCRYPT_P = 1


def _derive(plaintext: str, salt: str) -> bytes:
    return hashlib.scrypt(
        plaintext.encode("utf-8"),
        salt=salt.encode("ascii"),
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_KEY_LENGTH,
    )


def hash_password(plaintext: str) -> str:
    """Return ``<hex digest>.<hex salt>`` for a plaintext password."""
    salt = secrets.token_hex(_SALT_BYTES)
    return f"{_derive(plaintext, salt).hex()}.{salt}"


def verify_password(plaintext: str, stored: str) -> bool:
    """Check a plaintext password against a stored hash in constant time."""
    digest, sep, salt = stored.partition(".")
    if not sep or not digest or not salt:
        return False
    try:
        expected = bytes.fromhex(digest)
        actual = _derive(plaintext, salt)
    except ValueError:
        return False
    return hmac.compare_digest(expected, actual)
