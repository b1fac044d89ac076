"""Password hashing and verification (bcrypt) plus input length limits."""

import bcrypt

# Default bcrypt cost; Settings.BCRYPT_ROUNDS overrides it for the running service.
BCRYPT_ROUNDS = 5

# Max lengths for input validation. No minimum beyond non-empty: legacy accounts use short passwords.
EMAIL_MAX_LEN = 255
NAME_MAX_LEN = 255
ROLE_MAX_LEN = 32
PASSWORD_MAX_LEN = 128

DEFAULT_ROLE = "USER"


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False
