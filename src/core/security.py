import bcrypt

DEFAULT_ROUNDS = 12


def get_password_hash(password: str, *, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash suitable for ADMIN_PASSWORD_HASH."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Compare a plaintext password against a bcrypt hash.

    Malformed hashes count as a mismatch rather than an error.
    """
    if not password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False
