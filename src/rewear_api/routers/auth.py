"""Authentication router.

Sign-in itself happens at the external identity provider; this router only
exposes the stored record of the authenticated caller.
"""

from fastapi import APIRouter, status

from ..dependencies import CurrentUser
from ..schemas.auth_schemas import UserResponse

router = APIRouter(
    prefix="/api/auth",
    tags=["authentication"],
    responses={
        401: {"description": "Unauthorized"},
        500: {"description": "Internal server error"},
    },
)


@router.get(
    "/user",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    description="Get the authenticated user's stored record, creating it on first sign-in",
)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get the authenticated user's record.

    The record is created or refreshed from the identity token's claims
    before it is returned, so the first call after sign-in registers the
    user with the starting points balance.

    Example:
        GET /api/auth/user
        Authorization: Bearer <identity token>

        Response:
        {
            "id": "user-123",
            "email": "ada@example.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "profile_image_url": null,
            "points": 100,
            "is_admin": false,
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-01-01T00:00:00Z"
        }
    """
    return UserResponse.model_validate(current_user)
