"""
Authentication Service

Password hashing, JWT issuing/verification and admin bootstrap.
"""

import logging
import uuid
from datetime import timedelta
from typing import Optional

import bcrypt
from jose import jwt, JWTError
from pymongo.errors import DuplicateKeyError

from glamora.config import settings
from glamora.database import get_db
from glamora.models.user import AccountStatus, User, UserRole
from glamora.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt."""
    raw = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Constant-time comparison of a password against a stored hash."""
    if not password_hash:
        return False
    raw = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


class AuthService:
    """
    Authentication service.

    SECURITY: All authentication flows go through this service.
    Tokens are HS256 JWTs signed with JWT_SECRET; there is no fallback
    secret.
    """

    def create_access_token(self, user: User) -> str:
        """Issue a signed token for a user."""
        expire = utc_now() + timedelta(hours=settings.jwt_expiry_hours)
        payload = {
            "sub": user.user_id,
            "role": user.role,
            "exp": expire,
        }
        return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """
        Verify a token and return its claims.

        Returns None for bad signatures, malformed tokens and expired tokens.
        """
        try:
            claims = jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=[settings.jwt_algorithm]
            )
        except JWTError as e:
            logger.debug(f"Token verification failed: {type(e).__name__}: {e}")
            return None

        if not claims.get("sub"):
            return None
        return claims

    # =========================================================================
    # End users
    # =========================================================================

    async def register_user(self, name: str, email: str, password: str) -> User:
        """
        Create a regular user account.

        Raises ValueError if the email is already registered.
        """
        db = get_db()
        email = email.lower()

        now = utc_now()
        user = User(
            user_id=str(uuid.uuid4()),
            name=name,
            email=email,
            role=UserRole.USER,
            is_active=True,
            account_status=AccountStatus(),
            created_at=now,
            updated_at=now,
        )
        doc = user.model_dump()
        doc["password_hash"] = hash_password(password)

        try:
            await db.users.insert_one(doc)
        except DuplicateKeyError:
            raise ValueError("Email is already registered")

        logger.info(f"Registered user {user.user_id}")
        return user

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Return the user when email and password match, else None."""
        db = get_db()
        doc = await db.users.find_one({"email": email.lower()}, {"_id": 0})
        if not doc or not verify_password(password, doc.get("password_hash")):
            return None
        return User(**doc)

    # =========================================================================
    # Admin dashboard
    # =========================================================================

    async def get_or_create_admin(self) -> User:
        """
        Find the configured admin account, creating it on first use.

        The stored password hash is derived from ADMIN_PASSWORD at creation
        time; rotate it by updating the document.
        """
        db = get_db()
        email = settings.admin_email.lower()

        doc = await db.users.find_one({"email": email}, {"_id": 0})
        if doc:
            return User(**doc)

        now = utc_now()
        admin = User(
            user_id=str(uuid.uuid4()),
            name=settings.admin_name,
            email=email,
            role=UserRole.ADMIN,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        new_doc = admin.model_dump()
        new_doc["password_hash"] = hash_password(settings.admin_password)

        try:
            await db.users.insert_one(new_doc)
            logger.info(f"Created admin account {email}")
        except DuplicateKeyError:
            # Concurrent first login created it
            doc = await db.users.find_one({"email": email}, {"_id": 0})
            if not doc:
                raise RuntimeError(f"Failed to get or create admin account {email}")
            return User(**doc)

        admin.password_hash = new_doc["password_hash"]
        return admin

    async def authenticate_admin(self, username: str, password: str) -> Optional[User]:
        """Check dashboard credentials and return the admin user."""
        if username != settings.admin_username:
            return None

        admin = await self.get_or_create_admin()
        if admin.role != UserRole.ADMIN.value or not admin.is_active:
            logger.warning(f"Configured admin account {admin.email} is not an active admin")
            return None

        if not verify_password(password, admin.password_hash):
            return None
        return admin
