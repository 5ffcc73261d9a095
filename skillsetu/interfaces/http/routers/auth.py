from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ....application.dto import RegisterUserInput
from ....application.use_cases.auth import GetCurrentUser, LoginUser, RegisterUser
from ....config import settings
from ....domain.entities import Identity
from ....domain.errors import DomainError
from ....infrastructure.db import get_db
from ....infrastructure.metrics import auth_events_total
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher, TokenService
from ..authz import get_identity, get_token_service
from ..limiter import limiter
from ..schemas import AuthResp, LoginReq, RegisterReq, UserResp

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResp, status_code=status.HTTP_201_CREATED)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
def register(
    request: Request,
    payload: RegisterReq | None = None,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    payload = payload or RegisterReq()
    uc = RegisterUser(repo=UserRepository(db), hasher=PasswordHasher(), tokens=tokens)
    try:
        result = uc.execute(RegisterUserInput(
            email=payload.email,
            password=payload.password,
            name=payload.name,
            role=payload.role,
        ))
    except DomainError:
        auth_events_total.labels(event="register_rejected").inc()
        raise
    auth_events_total.labels(event="registered").inc()
    return AuthResp(
        message="User registered successfully",
        token=result.token,
        user=UserResp.model_validate(result.user),
    )


# Более строгий лимит для логина (защита от брутфорса)
@router.post("/login", response_model=AuthResp)
@limiter.limit(f"{settings.LOGIN_RATE_LIMIT_PER_MINUTE}/minute")
def login(
    request: Request,
    payload: LoginReq | None = None,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    payload = payload or LoginReq()
    uc = LoginUser(repo=UserRepository(db), hasher=PasswordHasher(), tokens=tokens)
    try:
        result = uc.execute(payload.email, payload.password)
    except DomainError:
        auth_events_total.labels(event="login_failed").inc()
        raise
    auth_events_total.labels(event="login").inc()
    return AuthResp(
        message="Login successful",
        token=result.token,
        user=UserResp.model_validate(result.user),
    )


@router.get("/me", response_model=UserResp)
def me(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    user = GetCurrentUser(UserRepository(db)).execute(identity)
    return UserResp.model_validate(user)
