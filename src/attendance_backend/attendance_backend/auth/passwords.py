from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password: str) -> str:
    """One-way salted hash (werkzeug scrypt/pbkdf2 default)."""
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password or "")
    except (ValueError, TypeError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False
