from datetime import timedelta
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import Settings, settings as app_settings
from app.core.auth.passwords import PasswordHasher
from app.core.auth.reset import ResetTokenManager
from app.core.auth.service import AuthService
from app.core.auth.session import SessionIssuer, TokenPayload
from app.core.exceptions import UnauthorizedError
from app.shared.database.models import User

security = HTTPBearer(auto_error=False)


def get_settings() -> Settings:
    return app_settings


# Componentes de solo lectura tras el arranque: una instancia por configuración
@lru_cache(maxsize=8)
def _build_hasher(rounds: int) -> PasswordHasher:
    return PasswordHasher(rounds=rounds)


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return _build_hasher(settings.password_hash_rounds)


def get_session_issuer(settings: Settings = Depends(get_settings)) -> SessionIssuer:
    return SessionIssuer(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        default_ttl=timedelta(minutes=settings.access_token_expire_minutes),
    )


def get_auth_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> AuthService:
    return AuthService(db, hasher, issuer)


def get_reset_manager(
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> ResetTokenManager:
    return ResetTokenManager(
        db,
        auth_service.credentials,
        ttl=timedelta(minutes=settings.reset_token_expire_minutes),
    )


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> TokenPayload:
    """Validar el Bearer token sin tocar la base de datos"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError()
    return issuer.verify(credentials.credentials)



def get_current_user(
    session: TokenPayload = Depends(get_token_payload),
    db: Session = Depends(get_db)
) -> User:
    """Obtener usuario actual desde el token; un usuario borrado es una sesión inválida"""
    user = db.query(User).filter(User.id == session.user_id).first()
    if user is None:
        raise UnauthorizedError()
    return user
