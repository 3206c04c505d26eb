"""
Security: one-way password hashing.
No plain-text passwords are ever stored or returned.
"""

from passlib.context import CryptContext

from app.core.exceptions import WrongInputError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    One-way hash for storage.

    Raises:
        WrongInputError: if the hashing backend rejects the input (e.g. too long).
    """
    try:
        return pwd_context.hash(password)
    except ValueError as exc:
        err = WrongInputError("invalid password")
        err.add_detail("password", str(exc) or "password cannot be hashed")
        raise err from exc


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time comparison against a stored hash."""
    return pwd_context.verify(plain, hashed)
