import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth.credentials import CredentialStore, PROFILE_FIELDS
from app.core.auth.passwords import PasswordHasher
from app.core.auth.schemas import (
    RegisterRequest, ProfileUpdateRequest, TokenResponse, UserResponse
)
from app.core.auth.session import SessionIssuer
from app.core.exceptions import NotFoundError, ValidationError, InternalStorageError
from app.shared.database.models import User

logger = logging.getLogger(__name__)

# No se pueden vaciar desde la actualización de perfil
REQUIRED_PROFILE_FIELDS = ("full_name", "door_number", "street", "city", "state", "pincode")


class AuthService:
    """Servicio de autenticación: registro, login y perfil"""

    def __init__(self, db: Session, hasher: PasswordHasher, issuer: SessionIssuer):
        self.db = db
        self.issuer = issuer
        self.credentials = CredentialStore(db, hasher)

    def _token_response(self, user: User, message: str) -> TokenResponse:
        issued = self.issuer.mint(user.id, user.email)
        return TokenResponse(
            success=True,
            message=message,
            token=issued.token,
            expires_at=issued.expires_at,
            user=UserResponse.model_validate(user),
        )

    async def register(self, request: RegisterRequest) -> TokenResponse:
        profile = request.model_dump(include=set(PROFILE_FIELDS))
        user = await self.credentials.register(request.email, request.password, profile)
        return self._token_response(user, "Registration successful")

    async def login(self, email: str, password: str) -> TokenResponse:
        user = await self.credentials.verify(email, password)
        logger.info(f"User {user.id} logged in")
        return self._token_response(user, "Login successful")

    def get_profile(self, user_id: int) -> UserResponse:
        user = self.credentials.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserResponse.model_validate(user)

    def update_profile(self, user_id: int, request: ProfileUpdateRequest) -> UserResponse:
        changes = request.model_dump(exclude_unset=True)

        blanked: List[str] = []
        for field, value in list(changes.items()):
            if isinstance(value, str):
                value = value.strip()
            if value in ("", None):
                if field in REQUIRED_PROFILE_FIELDS:
                    blanked.append(ProfileUpdateRequest.model_fields[field].alias or field)
                    continue
                value = None
            changes[field] = value
        if blanked:
            raise ValidationError(blanked)

        user = self.credentials.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        for field, value in changes.items():
            setattr(user, field, value)

        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Storage error updating profile of user {user_id}")
            raise InternalStorageError()

        self.db.refresh(user)
        logger.info(f"Profile updated for user {user_id}: {sorted(changes)}")
        return UserResponse.model_validate(user)
