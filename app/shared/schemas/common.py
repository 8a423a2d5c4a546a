# app/shared/schemas/common.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional
from datetime import datetime

from app.shared.utils.time_utils import utcnow


class CamelModel(BaseModel):
    """Modelos de API: camelCase en el cable, snake_case en Python"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BaseResponse(CamelModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=utcnow)


class ErrorResponse(BaseResponse):
    success: bool = False
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
