# app/core/auth/session.py
import calendar
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import jwt, JWTError

from app.core.exceptions import InvalidSignatureError, ExpiredTokenError
from app.shared.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=7)


def _to_epoch(value: datetime) -> int:
    return calendar.timegm(value.utctimetuple())


def _from_epoch(value) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


class SessionIssuer:
    """Emite y verifica tokens de sesión firmados (JWT). Sin estado en servidor:
    la validez depende solo de la firma y de la expiración."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        default_ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.default_ttl = default_ttl
        self._clock = clock

    def mint(self, user_id: int, email: str, ttl: Optional[timedelta] = None) -> IssuedToken:
        """Crear token de acceso"""
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + (ttl if ttl is not None else self.default_ttl)

        claims = {
            "sub": str(user_id),
            "user_id": user_id,
            "email": email,
            "iat": _to_epoch(issued_at),
            "exp": _to_epoch(expires_at),
        }
        token = jwt.encode(claims, self._secret_key, algorithm=self.algorithm)
        return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def verify(self, token: str) -> TokenPayload:
        """Verificar y decodificar token"""
        try:
            # La expiración se comprueba abajo contra el reloj inyectado
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug(f"Session token rejected: {e}")
            raise InvalidSignatureError()

        try:
            user_id = int(claims["user_id"])
            email = str(claims["email"])
            issued_at = _from_epoch(claims["iat"])
            expires_at = _from_epoch(claims["exp"])
        except (KeyError, TypeError, ValueError):
            raise InvalidSignatureError()

        if not self._clock() < expires_at:
            raise ExpiredTokenError()

        return TokenPayload(user_id=user_id, email=email, issued_at=issued_at, expires_at=expires_at)
