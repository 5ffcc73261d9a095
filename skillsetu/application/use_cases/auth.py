import structlog

from ...domain.entities import Identity, Role, User
from ...domain.errors import NotFound, Unauthorized, ValidationError
from ..dto import AuthResult, RegisterUserInput
from ..ports import IPasswordHasher, ITokenService, IUserRepository

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, tokens: ITokenService):
        self.repo = repo
        self.hasher = hasher
        self.tokens = tokens

    def execute(self, data: RegisterUserInput) -> AuthResult:
        if not (data.email and data.password and data.name and data.role):
            raise ValidationError("All fields are required")
        try:
            role = Role(data.role)
        except ValueError:
            raise ValidationError("Invalid role")

        pwd_hash = self.hasher.hash(data.password)
        # занятый email: репозиторий кидает Conflict по unique-индексу
        user = self.repo.create(data.email, pwd_hash, data.name, role)
        token = self.tokens.issue(user.id, user.email, user.role)
        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return AuthResult(user=user, token=token)


class LoginUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, tokens: ITokenService):
        self.repo = repo
        self.hasher = hasher
        self.tokens = tokens

    def execute(self, email: str | None, password: str | None) -> AuthResult:
        if not (email and password):
            raise ValidationError("Email and password required")

        user = self.repo.get_by_email(email)
        if user is None:
            # сверяем с фиктивным хэшем, чтобы время ответа не выдавало отсутствие email
            self.hasher.verify(password, self.hasher.dummy_hash)
            logger.info("login_failed", reason="unknown_email")
            raise Unauthorized(INVALID_CREDENTIALS)
        if not self.hasher.verify(password, user.password_hash):
            logger.info("login_failed", reason="bad_password", user_id=user.id)
            raise Unauthorized(INVALID_CREDENTIALS)

        token = self.tokens.issue(user.id, user.email, user.role)
        logger.info("user_logged_in", user_id=user.id)
        return AuthResult(user=user, token=token)


class GetCurrentUser:
    def __init__(self, repo: IUserRepository):
        self.repo = repo

    def execute(self, identity: Identity) -> User:
        user = self.repo.get_by_id(identity.id)
        if user is None:
            raise NotFound("User not found")
        return user
