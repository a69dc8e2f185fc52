"""Password hashing and verification."""

import logging
import secrets

import bcrypt

logger = logging.getLogger(__name__)


class AuthService:
    """Credential hashing for account passwords.

    Digests are salted bcrypt strings; two hashes of the same password differ,
    so comparison always goes through ``verify_password``.
    """

    # Checked against when the email is unknown so misses cost a full bcrypt round
    _DUMMY_HASH = bcrypt.hashpw(secrets.token_bytes(16), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def get_dummy_hash() -> str:
        return AuthService._DUMMY_HASH

    @staticmethod
    def hash_password(password: str) -> str:
        """Return the bcrypt digest stored in ``users.password_hash``."""
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        """True when ``password`` matches ``hashed``; malformed digests never match."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt digest")
            return False
