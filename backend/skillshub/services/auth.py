"""Password hashing and session management."""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from skillshub.config import settings
from skillshub.models.user import User, UserRole, Session

logger = logging.getLogger(__name__)

ph = PasswordHasher()

# Dashboard each role lands on after login
ROLE_REDIRECTS = {
    UserRole.JOB_SEEKER: "/dashboard/seeker",
    UserRole.EMPLOYER: "/dashboard/employer",
    UserRole.ADMIN: "/dashboard/admin",
}


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(stored_hash: str, password: str) -> bool:
    try:
        return ph.verify(stored_hash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


async def create_session(db: AsyncSession, user: User) -> str:
    """Create a session row for the user and return its token."""
    token = generate_session_token()
    db.add(Session(
        session_token=token,
        user_id=user.id,
        expires_at=datetime.utcnow() + timedelta(days=settings.session_ttl_days),
    ))
    user.last_login_at = datetime.utcnow()
    await db.commit()
    return token


async def get_session_user(db: AsyncSession, token: str) -> Optional[User]:
    """
    Resolve a session token to its user.

    Returns None for unknown or expired tokens. Expired sessions are deleted.
    The user's seeker/employer profile is loaded with it.
    """
    result = await db.execute(
        select(Session)
        .where(Session.session_token == token)
        .options(
            selectinload(Session.user).selectinload(User.seeker_profile),
            selectinload(Session.user).selectinload(User.employer_profile),
        )
    )
    session = result.scalar_one_or_none()
    if not session:
        return None

    if session.is_expired():
        await db.delete(session)
        await db.commit()
        logger.info(f"Expired session removed for user {session.user_id}")
        return None

    return session.user


async def delete_session(db: AsyncSession, token: str) -> None:
    await db.execute(delete(Session).where(Session.session_token == token))
    await db.commit()
