"""Password hashing for user accounts.

Uses bcrypt with per-hash salts. Verification is constant-time.
"""

import hashlib

import bcrypt

# bcrypt only considers the first 72 bytes of input
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode()[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt.

    Args:
        password: The plaintext password

    Returns:
        The bcrypt hash as a string
    """
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash.

    Args:
        password: The plaintext password to verify
        password_hash: The bcrypt hash to verify against

    Returns:
        True if the password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode())
    except ValueError:
        return False


def password_fingerprint(password_hash: str) -> str:
    """Short digest of a password hash, embedded in reset tokens.

    A reset token stops verifying once the password (and so its hash) changes.
    """
    return hashlib.sha256(password_hash.encode()).hexdigest()[:16]
