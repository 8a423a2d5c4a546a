import re
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.shared.schemas.common import BaseResponse, CamelModel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean_optional(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class AddressFields(CamelModel):
    door_number: str = Field(..., min_length=1, max_length=50)
    building_name: Optional[str] = Field(None, max_length=255)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    pincode: str = Field(..., min_length=3, max_length=20)

    @field_validator('building_name', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return _clean_optional(v)


class RegisterRequest(AddressFields):
    """Schema para registro de usuario"""
    email: str = Field(..., max_length=255, description="Email del usuario")
    password: str = Field(..., min_length=6, description="Contraseña del usuario")
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError('Invalid email address')
        return v

    @field_validator('phone', mode='before')
    @classmethod
    def phone_blank_to_none(cls, v):
        return _clean_optional(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "a@x.com",
                "password": "secret1",
                "fullName": "A",
                "doorNumber": "12",
                "street": "Main",
                "city": "X",
                "state": "Y",
                "pincode": "600001"
            }
        }
    }


class UserLogin(CamelModel):
    """Schema para login de usuario"""
    email: str = Field(..., description="Email del usuario")
    password: str = Field(..., min_length=1, description="Contraseña del usuario")


class ProfileUpdateRequest(CamelModel):
    """Actualización parcial del perfil. Las credenciales no se cambian aquí."""
    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    door_number: Optional[str] = Field(None, max_length=50)
    building_name: Optional[str] = Field(None, max_length=255)
    street: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: Optional[str] = Field(None, max_length=20)


class ForgotPasswordRequest(CamelModel):
    email: str


class ResetPasswordRequest(CamelModel):
    email: str
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class UserResponse(CamelModel):
    """Perfil del usuario, nunca incluye el hash de la contraseña"""
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    door_number: str
    building_name: Optional[str] = None
    street: str
    city: str
    state: str
    pincode: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TokenResponse(BaseResponse):
    """Schema para respuesta de token"""
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse


class ProfileResponse(BaseResponse):
    user: UserResponse


class ForgotPasswordResponse(BaseResponse):
    expires_at: datetime
    reset_token: Optional[str] = None


class OAuthTokenResponse(CamelModel):
    """Respuesta OAuth2 estándar para /auth/token (docs interactivas)"""
    access_token: str
    token_type: str = "bearer"

    model_config = {"alias_generator": None}
