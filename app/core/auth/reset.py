# app/core/auth/reset.py
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth.credentials import CredentialStore
from app.core.exceptions import NotFoundError, InvalidOrExpiredTokenError, InternalStorageError
from app.shared.database.models import User
from app.shared.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_RESET_TTL = timedelta(hours=1)
RESET_TOKEN_BYTES = 32


def digest_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ResetTicket:
    user_id: int
    token: str
    expires_at: datetime


class ResetTokenManager:
    """
    Tokens de reset de un solo uso, guardados en la fila del usuario.

    Un usuario tiene como máximo un token activo: pedir otro invalida el anterior.
    En la base solo se guarda el digest SHA-256 del token.
    """

    def __init__(
        self,
        db: Session,
        credentials: CredentialStore,
        ttl: timedelta = DEFAULT_RESET_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.credentials = credentials
        self.ttl = ttl
        self._clock = clock

    def _lock_user(self, email: str) -> Optional[User]:
        # FOR UPDATE serializa request/consume concurrentes sobre la misma fila
        return (
            self.db.query(User)
            .filter(User.email == email)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def request(self, email: str) -> ResetTicket:
        try:
            user = self._lock_user(email)
            if user is None:
                self.db.rollback()
                raise NotFoundError("Email not found")

            token = secrets.token_urlsafe(RESET_TOKEN_BYTES)
            expires_at = self._clock() + self.ttl

            user.reset_token = digest_token(token)
            user.reset_token_expires_at = expires_at
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Storage error issuing reset token")
            raise InternalStorageError()

        logger.info(f"Password reset token issued for user {user.id}")
        return ResetTicket(user_id=user.id, token=token, expires_at=expires_at)

    async def consume(self, email: str, token: str, new_password: str) -> None:
        # Comprobación barata sin lock: un token inválido nunca paga bcrypt
        user = self.credentials.get_by_email(email)
        if user is None or not self._is_valid(user, token):
            self.db.rollback()
            raise InvalidOrExpiredTokenError()

        # Hash fuera del lock; la fila se vuelve a validar al bloquearla
        new_hash = await self.credentials.hasher.ahash(new_password)

        try:
            user = self._lock_user(email)
            if user is None or not self._is_valid(user, token):
                self.db.rollback()
                raise InvalidOrExpiredTokenError()

            self.credentials.set_password_hash(user, new_hash)
            user.reset_token = None
            user.reset_token_expires_at = None
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Storage error consuming reset token")
            raise InternalStorageError()

        logger.info(f"Password reset completed for user {user.id}")

    def _is_valid(self, user: User, token: str) -> bool:
        if user.reset_token is None or user.reset_token_expires_at is None:
            return False
        if not hmac.compare_digest(user.reset_token, digest_token(token)):
            return False
        return self._clock() < user.reset_token_expires_at
