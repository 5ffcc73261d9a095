from datetime import datetime, timedelta, timezone
from functools import cached_property

from jose import jwt, JWTError
from passlib.context import CryptContext

from ..config import settings
from ..domain.entities import Claims, Role
from ..domain.errors import InvalidToken
from ..application.ports import IPasswordHasher, ITokenService

pwd = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__truncate_error=False,
)


class PasswordHasher(IPasswordHasher):
    def hash(self, plain: str) -> str: return pwd.hash(plain)
    def verify(self, plain: str, hashed: str) -> bool: return pwd.verify(plain, hashed)

    @cached_property
    def dummy_hash(self) -> str:
        return _dummy_hash()


_DUMMY_HASH: str | None = None


def _dummy_hash() -> str:
    # считается один раз на процесс
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = pwd.hash("skillsetu-timing-dummy")
    return _DUMMY_HASH


class TokenService(ITokenService):
    """JWT (HS256) с id, email и ролью пользователя.

    verify() проверяет только подпись и срок действия, в БД не ходит:
    удалённый пользователь остаётся аутентифицированным до истечения токена.
    """

    def __init__(
        self,
        secret_key: str = settings.SECRET_KEY,
        algorithm: str = settings.JWT_ALGORITHM,
        minutes: int = settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.minutes = minutes

    def issue(self, user_id: int, email: str, role: Role) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": Role(role).value,
            "iat": now,
            "exp": now + timedelta(minutes=self.minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str | None) -> Claims:
        if not token:
            raise InvalidToken("Token missing")
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidToken(str(e)) from e

        try:
            return Claims(
                sub=int(payload["sub"]),
                email=payload["email"],
                role=Role(payload["role"]),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidToken("Malformed claims") from e
