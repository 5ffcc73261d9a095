from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ...domain import policy
from ...domain.entities import Identity
from ...domain.errors import Forbidden, InvalidToken, Unauthorized
from ...domain.policy import Action
from ...infrastructure.metrics import auth_events_total
from ...infrastructure.security import TokenService

# auto_error=False: отсутствие токена обрабатываем сами (401, а не 403 от HTTPBearer)
bearer = HTTPBearer(auto_error=False)


def get_token_service() -> TokenService:
    return TokenService()


def get_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    if creds is None or not creds.credentials:
        auth_events_total.labels(event="token_missing").inc()
        raise Unauthorized("Access token required")
    try:
        claims = tokens.verify(creds.credentials)
    except InvalidToken:
        auth_events_total.labels(event="token_invalid").inc()
        raise Forbidden("Invalid or expired token")

    identity = Identity.from_claims(claims)
    request.state.identity = identity
    return identity


def require_action(action: Action):
    """Guard + проверка роли по таблице политик для конкретного действия."""
    def _dependency(identity: Identity = Depends(get_identity)) -> Identity:
        policy.check(identity, action)
        return identity
    return _dependency
