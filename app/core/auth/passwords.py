# app/core/auth/passwords.py
import logging

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

# Límite de bcrypt
MAX_PASSWORD_BYTES = 72


def _truncate(password: str) -> str:
    """Truncar a 72 bytes sin partir un carácter UTF-8"""
    return password.encode('utf-8')[:MAX_PASSWORD_BYTES].decode('utf-8', errors='ignore')


class PasswordHasher:
    """Hash bcrypt con costo configurable.

    hash/verify son CPU-bound; desde código async usar ahash/averify, que
    los ejecutan en el threadpool y no bloquean el event loop.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self.context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        # Para comparar aunque el email no exista y no filtrar por tiempo de respuesta
        self._dummy_hash = self.context.hash("redcap-dummy-password")

    def hash(self, password: str) -> str:
        """Generar hash de contraseña"""
        return self.context.hash(_truncate(password))

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verificar contraseña (comparación de passlib, tiempo constante)"""
        try:
            return self.context.verify(_truncate(password), hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False

    def verify_dummy(self, password: str) -> bool:
        self.verify(password, self._dummy_hash)
        return False

    async def ahash(self, password: str) -> str:
        return await run_in_threadpool(self.hash, password)

    async def averify(self, password: str, hashed_password: str) -> bool:
        return await run_in_threadpool(self.verify, password, hashed_password)

    async def averify_dummy(self, password: str) -> bool:
        return await run_in_threadpool(self.verify_dummy, password)
