# app/shared/utils/time_utils.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    """UTC naive: las columnas DateTime se guardan sin zona horaria"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
