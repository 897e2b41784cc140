"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.application.use_cases.users import get_user
from app.config import Settings
from app.domain.entities import User
from app.domain.errors import StoreUnavailableError, UserNotFoundError
from app.infrastructure.database import get_db
from app.infrastructure.security import decode_access_token

# Tokens are issued by the account service; only the bearer header is read here.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was created with."""

    return request.app.state.settings


def resolve_current_user(token: str, db: Session, settings: Settings | None = None) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token, settings=settings)
    except ValueError as exc:
        raise _credentials_error() from exc

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise _credentials_error() from exc

    try:
        return get_user(db, user_id, include_inactive=True)
    except UserNotFoundError as exc:
        raise _credentials_error("User not found") from exc
    except StoreUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db, settings)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user
