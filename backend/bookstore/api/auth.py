"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, status

from bookstore.api.deps import get_auth_service, get_client_info
from bookstore.schemas.auth import LoginRequest, RefreshRequest, SignupRequest, TokenPairResponse
from bookstore.schemas.common import MessageResponse
from bookstore.schemas.user import PrincipalResponse
from bookstore.services.auth import AuthService, TokenPair
from bookstore.services.ledger import ClientInfo

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(pair: TokenPair) -> TokenPairResponse:
    return TokenPairResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        principal=PrincipalResponse.model_validate(pair.user),
    )


@router.post("/signup", response_model=PrincipalResponse, status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    """Register a new user."""
    user = auth.signup(body.email, body.password, body.name)
    return PrincipalResponse.model_validate(user)


@router.post("/login", response_model=TokenPairResponse)
def login(
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
    client: ClientInfo = Depends(get_client_info),
):
    """Exchange credentials for an access/refresh token pair."""
    return _token_response(auth.login(body.email, body.password, client))


@router.post("/refresh", response_model=TokenPairResponse)
def refresh_tokens(
    body: RefreshRequest,
    auth: AuthService = Depends(get_auth_service),
    client: ClientInfo = Depends(get_client_info),
):
    """Redeem a refresh token for a new pair. Each refresh token works once."""
    return _token_response(auth.refresh(body.refresh_token, client))


@router.post("/logout", response_model=MessageResponse)
def logout(body: RefreshRequest, auth: AuthService = Depends(get_auth_service)):
    """Revoke a refresh token."""
    auth.logout(body.refresh_token)
    return MessageResponse(message="Successfully logged out")
