from dataclasses import dataclass
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cinema.core.exceptions import ValidationFailedError
from cinema.core.settings import Settings

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Verify the bearer JWT and return its payload.

    Raises:
        HTTPException: 401 if the header is missing, or the token is invalid,
            expired, has the wrong issuer or carries no role claim.
    """
    if credentials is None:
        raise _unauthorized("Missing Authorization header")

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError as e:
        raise _unauthorized("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise _unauthorized("Invalid token") from e

    if settings.JWT_ISSUER and payload.get("iss") != settings.JWT_ISSUER:
        raise _unauthorized("Invalid token issuer")
    if not isinstance(payload.get("role"), str) or not payload["role"]:
        raise _unauthorized("Role not found in token")
    return payload


def require_admin(
    payload: dict = Depends(verify_token),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    if payload["role"] != settings.ADMIN_ROLE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return payload


@dataclass
class PageParams:
    limit: int
    offset: int


def page_params(
    request: Request,
    limit: int = Query(..., gt=0, description="Maximum number of items to return"),
    offset: int = Query(..., ge=0, description="Number of items to skip"),
) -> PageParams:
    max_page_size = get_app_settings(request).MAX_PAGE_SIZE
    if limit > max_page_size:
        raise ValidationFailedError.for_field(
            "query.limit", f"limit must not exceed {max_page_size}"
        )
    return PageParams(limit=limit, offset=offset)


AdminToken = Annotated[dict, Depends(require_admin)]
Page = Annotated[PageParams, Depends(page_params)]
