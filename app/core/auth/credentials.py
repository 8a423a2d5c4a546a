# app/core/auth/credentials.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.database import is_unique_violation
from app.core.auth.passwords import PasswordHasher
from app.core.exceptions import DuplicateEmailError, InvalidCredentialsError, InternalStorageError
from app.shared.database.models import User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "full_name", "phone", "door_number", "building_name",
    "street", "city", "state", "pincode",
)


class CredentialStore:
    """Dueño de los campos de credenciales del usuario"""

    def __init__(self, db: Session, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    async def register(self, email: str, raw_password: str, profile: Dict[str, Any]) -> User:
        """
        Crear usuario. La restricción única sobre email es la fuente de verdad:
        no hay consulta previa, la inserción decide.
        """
        password_hash = await self.hasher.ahash(raw_password)

        user = User(
            email=email,
            password_hash=password_hash,
            **{k: profile.get(k) for k in PROFILE_FIELDS}
        )

        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e, "email"):
                logger.info("Registration rejected: email already registered")
                raise DuplicateEmailError()
            logger.exception("Integrity error registering user")
            raise InternalStorageError()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Storage error registering user")
            raise InternalStorageError()

        self.db.refresh(user)
        logger.info(f"User registered: id={user.id}")
        return user

    async def verify(self, email: str, raw_password: str) -> User:
        """Verificar credenciales; mismo error para email inexistente y contraseña incorrecta"""
        user = self.get_by_email(email)

        if user is None:
            await self.hasher.averify_dummy(raw_password)
            raise InvalidCredentialsError()

        if not await self.hasher.averify(raw_password, user.password_hash):
            raise InvalidCredentialsError()

        return user

    def set_password_hash(self, user: User, password_hash: str) -> None:
        """Solo asigna; el commit lo hace quien controla la transacción"""
        user.password_hash = password_hash
