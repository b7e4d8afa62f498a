import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.auth_utils import create_access_token, decode_sign_in_token
from src.api.deps import Settings, get_current_user, get_rules, get_settings
from src.api.schemas import SignInRequest, SignInResponse, UserResponse
from src.domain.entities import User
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/google", response_model=SignInResponse)
def sign_in(
    data: SignInRequest,
    rules: Rules = Depends(get_rules),
    settings: Settings = Depends(get_settings),
) -> SignInResponse:
    """Exchange a client sign-in token for an access token."""
    if not data.id_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token required")

    try:
        claims = decode_sign_in_token(data.id_token)
    except ValueError as e:
        logger.warning("Sign-in rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication failed"
        ) from e

    token = create_access_token(
        data={
            "sub": claims["user_id"],
            "email": claims["email"],
            "name": claims["name"],
            "picture": claims["picture"],
        },
        secret_key=settings.secret_key,
        expires_delta=timedelta(minutes=rules.auth.token_ttl_minutes),
    )
    logger.info("Issued access token for %s", claims["email"])

    return SignInResponse(
        token=token,
        user=UserResponse(
            id=claims["user_id"],
            email=claims["email"],
            name=claims["name"],
            picture=claims["picture"],
        ),
    )


@router.get("/me", response_model=UserResponse)
def read_users_me(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Get current user info."""
    return UserResponse(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        picture=current_user.picture,
    )
