"""
Identity Store.

Owns users, the single active session and feed API keys. It is built once
at startup and handed to the services that need the active owner; nothing
reads the session from module state.
"""

from logging import getLogger
from urllib.parse import quote
from uuid import UUID, uuid4

from blogcore.configs import settings
from blogcore.db import SessionMaker, transaction
from blogcore.errors import (
    DuplicateEntryError,
    PermissionDeniedError,
    PreconditionError,
    RecordNotFoundError,
    ValidationError,
)
from blogcore.managers import hash_password, verify_and_update_password
from blogcore.models import UserDB
from blogcore.repositories import StateRepository, UserRepository
from blogcore.repositories.user import normalize_email
from blogcore.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

ADMIN_ROLE = "admin"
USER_ROLE = "user"


def default_avatar(username: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(username)}&background=random"


def new_api_key() -> str:
    return str(uuid4())


class IdentityStore:
    """Users, the active session, and API keys."""

    def __init__(
        self,
        session_maker: SessionMaker,
        users: UserRepository | None = None,
        state: StateRepository | None = None,
    ) -> None:
        self._session_maker = session_maker
        self.users = users or UserRepository(session_maker)
        self.state = state or StateRepository(session_maker)

    async def bootstrap(self) -> UserDB | None:
        """
        Create the default admin when the user table is empty.

        Runs once during startup, before any request is served.

        Returns:
            UserDB | None: The created admin, None if users already exist
        """
        if await self.users.count() > 0:
            return None
        admin = UserDB(
            username=settings.DEFAULT_ADMIN_USERNAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            password_hash=await hash_password(settings.DEFAULT_ADMIN_PASSWORD.get_secret_value()),
            avatar=default_avatar(settings.DEFAULT_ADMIN_USERNAME),
            role=ADMIN_ROLE,
            api_key=new_api_key(),
        )
        admin = await self.users.add(admin)
        logger.warning(f"Default admin account created: {admin.email}. Change its password.")
        return admin

    async def signup(self, username: str, email: str, password: str) -> UserDB:
        """
        Register a user and log them in.

        The first user ever registered becomes an admin and gets an API key.
        The role check and the insert share one transaction.

        Raises:
            DuplicateEntryError: If the email is already registered
        """
        password_hash = await hash_password(password)
        async with transaction(self._session_maker) as session:
            is_first = await self.users.count(session) == 0
            db_user = UserDB(
                username=username.strip(),
                email=email,
                password_hash=password_hash,
                avatar=default_avatar(username.strip()),
                role=ADMIN_ROLE if is_first else USER_ROLE,
                api_key=new_api_key() if is_first else None,
            )
            db_user = await self.users.add(db_user, session)
            await self.state.set_session_user(db_user.id, session)

        logger.info(f"User {db_user.id} signed up with role {db_user.role}")
        return db_user

    async def login(self, email: str, password: str) -> UserDB | None:
        """
        Check credentials and open the session.

        Returns:
            UserDB | None: The user, None when the credentials do not match
        """
        db_user = await self.users.get_by_email(email)
        is_valid, new_hash = await verify_and_update_password(
            password,
            db_user.password_hash if db_user else None,
        )
        if db_user is None or not is_valid:
            logger.info("Login rejected")
            return None
        if new_hash:
            await self.users.update_fields(db_user.id, password_hash=new_hash)
        await self.state.set_session_user(db_user.id)
        logger.info(f"User {db_user.id} logged in")
        return db_user

    async def logout(self) -> None:
        await self.state.set_session_user(None)

    async def active_user(self) -> UserDB | None:
        """Return the user of the open session, if any."""
        user_id = await self.state.get_session_user_id()
        if user_id is None:
            return None
        return await self.users.get_by_id(user_id)

    async def require_active_user(self) -> UserDB:
        """
        Return the active user or fail.

        Raises:
            PreconditionError: If no session is open
        """
        user = await self.active_user()
        if user is None:
            raise PreconditionError
        return user

    async def require_admin(self) -> UserDB:
        """
        Return the active user if they are an admin.

        Raises:
            PreconditionError: If no session is open
            PermissionDeniedError: If the active user is not an admin
        """
        user = await self.require_active_user()
        if user.role != ADMIN_ROLE:
            raise PermissionDeniedError
        return user

    async def generate_api_key(self, user_id: UUID) -> str:
        """
        Issue a fresh API key, replacing any previous one.

        Raises:
            RecordNotFoundError: If the user does not exist
        """
        api_key = new_api_key()
        if await self.users.update_fields(user_id, api_key=api_key) is None:
            raise RecordNotFoundError(detail="User not found")
        logger.info(f"API key regenerated for user {user_id}")
        return api_key

    async def find_by_api_key(self, api_key: str) -> UserDB | None:
        if not api_key:
            return None
        return await self.users.get_by_api_key(api_key)

    async def increment_request_count(self, user_id: UUID) -> int:
        """
        Count one accepted feed request for the key holder.

        Raises:
            RecordNotFoundError: If the user does not exist
        """
        count = await self.users.increment_request_count(user_id)
        if count is None:
            raise RecordNotFoundError(detail="User not found")
        return count

    async def list_users(self) -> list[UserDB]:
        return await self.users.get_all()

    async def toggle_role(self, user_id: UUID) -> UserDB:
        """
        Flip a user between ``admin`` and ``user``.

        Raises:
            RecordNotFoundError: If the user does not exist
        """
        db_user = await self.users.get_by_id(user_id)
        if db_user is None:
            raise RecordNotFoundError(detail="User not found")
        new_role = USER_ROLE if db_user.role == ADMIN_ROLE else ADMIN_ROLE
        updated = await self.users.update_fields(user_id, role=new_role)
        if updated is None:
            raise RecordNotFoundError(detail="User not found")
        logger.info(f"User {user_id} role changed to {new_role}")
        return updated

    async def update_profile(self, user_id: UUID, username: str, email: str) -> UserDB:
        """
        Change a user's username and email.

        Raises:
            ValidationError: If either field is blank
            DuplicateEntryError: If the email belongs to another user
            RecordNotFoundError: If the user does not exist
        """
        username, email = username.strip(), normalize_email(email)
        if not username or not email:
            raise ValidationError(detail="Username and email are required")

        holder = await self.users.get_by_email(email)
        if holder is not None and holder.id != user_id:
            raise DuplicateEntryError(detail=f"Email '{email}' already exists")

        updated = await self.users.update_fields(user_id, username=username, email=email)
        if updated is None:
            raise RecordNotFoundError(detail="User not found")
        return updated
