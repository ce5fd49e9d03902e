"""
Password hashing module using Argon2 with passlib's CryptContext.

Hashing is CPU bound, so the async helpers push the work onto a thread pool
to keep the event loop (and therefore autosave timers) responsive.
"""

from asyncio import get_running_loop
from concurrent.futures import ThreadPoolExecutor

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from blogcore.configs import CONFIG_MAP, settings
from blogcore.errors import PasswordHashingError
from blogcore.monitoring import get_logger

executor = ThreadPoolExecutor(max_workers=4)
logger = get_logger(__name__)


class PasswordHasher:
    """
    Password hashing and verification using Argon2id.

    pbkdf2_sha256 stays registered as a deprecated scheme so older hashes
    still verify and can be migrated with ``verify_and_update``.
    """

    def __init__(self, level: str | None = None) -> None:
        self.level = level or settings.PASSWORD_SECURITY_LEVEL
        costs = CONFIG_MAP[self.level]
        self.pwd_context = CryptContext(
            schemes=["argon2", "pbkdf2_sha256"],
            deprecated="pbkdf2_sha256",
            argon2__memory_cost=costs.memory_cost,
            argon2__time_cost=costs.time_cost,
            argon2__parallelism=costs.parallelism,
        )
        logger.info(f"PasswordHasher initialized with Argon2id on level {self.level}")

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Args:
            password: The plaintext password to hash

        Returns:
            str: The hashed password in Argon2id format

        Raises:
            ValueError: If password is empty
            PasswordHashingError: If the backend fails
        """
        if not password:
            msg = "Password cannot be empty"
            raise ValueError(msg)

        try:
            return self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Error hashing password")
            raise PasswordHashingError from e

    def verify(self, password: str, hashed_password: str | None) -> bool:
        """
        Verify a plaintext password against a stored hash.

        A missing or unreadable hash never matches.

        Example:
            >>> hasher = PasswordHasher()
            >>> hasher.verify("secret", hasher.hash("secret"))
            True
        """
        if not isinstance(hashed_password, str) or not hashed_password.strip():
            # Keep timing consistent with a real verification
            self.pwd_context.dummy_verify()
            return False

        try:
            return self.pwd_context.verify(password, hashed_password)
        except ValueError:
            logger.warning("Stored hash is corrupted or in an unknown format")
            return False

    def check_needs_rehash(self, hashed_password: str) -> bool:
        try:
            return self.pwd_context.needs_update(hashed_password)
        except ValueError:
            return False

    def verify_and_update(
        self,
        password: str,
        hashed_password: str | None,
    ) -> tuple[bool, str | None]:
        """
        Verify a password and return a fresh hash if the stored one is outdated.

        Returns:
            tuple[bool, str | None]: Whether the password matched, and a new
            hash when the stored one uses a deprecated scheme or old costs
        """
        if not self.verify(password, hashed_password):
            return False, None
        if hashed_password and self.check_needs_rehash(hashed_password):
            logger.info(f"Password hash upgraded to level {self.level}")
            return True, self.hash(password)
        return True, None


_default_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get or create the default password hasher instance."""
    global _default_hasher  # noqa: PLW0603
    if _default_hasher is None:
        _default_hasher = PasswordHasher()
    return _default_hasher


async def hash_password(password: str) -> str:
    """Hash a password with the default hasher off the event loop."""
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().hash,
        password,
    )


async def verify_password(password: str, hashed_password: str | None) -> bool:
    """Verify a password with the default hasher off the event loop."""
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().verify,
        password,
        hashed_password,
    )


async def verify_and_update_password(
    password: str,
    hashed_password: str | None,
) -> tuple[bool, str | None]:
    """Verify a password and get an upgraded hash if needed, off the event loop."""
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().verify_and_update,
        password,
        hashed_password,
    )
