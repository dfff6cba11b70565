"""
Authentication endpoints and dependencies.

Sessions are random tokens stored in the `sessions` table and carried in an
httpOnly cookie. Signup and email verification happen outside this service;
users arrive here already created.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from skillshub.config import settings
from skillshub.database import get_db
from skillshub.models.user import User, UserRole
from skillshub.schemas.auth import LoginRequest, LoginResponse, MeResponse, SessionUser
from skillshub.services.auth import (
    ROLE_REDIRECTS,
    create_session,
    delete_session,
    get_session_user,
    verify_password,
)

logger = logging.getLogger(__name__)
router = APIRouter()


# Authentication Dependencies
async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Current user if the request carries a valid session cookie, else None."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    return await get_session_user(db, token)


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user)
) -> User:
    """
    Dependency requiring an authenticated user.

    Raises:
        HTTPException 401: No session or session expired
    """
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_role(*roles: UserRole):
    """
    Dependency factory restricting an endpoint to the given roles.

    Example:
        @router.get("/jobs")
        async def list_jobs(user: User = Depends(require_role(UserRole.EMPLOYER))):
            ...
    """
    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning(
                f"User {current_user.email} (role={current_user.role.value}) "
                f"denied access; requires {[r.value for r in roles]}"
            )
            raise HTTPException(status_code=403, detail="Forbidden")
        return current_user

    return dependency


# Endpoints
@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Log in with email and password.

    Returns:
        200: Session cookie set, role-specific redirect URL returned
        401: Unknown email or wrong password
        403: Email not yet verified
    """
    result = await db.execute(
        select(User).where(User.email == credentials.email.strip().lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(user.password_hash, credentials.password):
        logger.warning(f"Failed login attempt for {credentials.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_email_verified:
        raise HTTPException(
            status_code=403,
            detail="Please verify your email before logging in"
        )

    token = await create_session(db, user)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        secure=settings.session_cookie_secure,
        path="/",
    )

    logger.info(f"Successful login: {user.email}")

    return LoginResponse(
        message="Login successful",
        redirect_url=ROLE_REDIRECTS.get(user.role, "/"),
        role=user.role.value,
    )


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Delete the current session (if any) and clear the cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        await delete_session(db, token)

    response.delete_cookie(key=settings.session_cookie_name, path="/")
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Current session user."""
    return MeResponse(user=SessionUser(
        user_id=current_user.id,
        email=current_user.email,
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        role=current_user.role.value,
        is_email_verified=current_user.is_email_verified,
    ))
