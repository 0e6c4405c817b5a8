"""Session routes. Tokens are issued by create_access_token; there is no login provider."""

from fastapi import APIRouter, Response, status

from cognicanvas.api.deps import CurrentUser
from cognicanvas.config import get_settings
from cognicanvas.schemas.user import UserRead

settings = get_settings()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """
    Clear the access_token cookie.

    The JWT itself stays valid until it expires.
    """
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=settings.environment != "development",
        samesite="lax",
    )


@router.get("/me", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    """The user requests are running as (the default user in single-tenant mode)."""
    return UserRead.model_validate(current_user)
