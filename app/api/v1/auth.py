from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from app.config.settings import Settings
from app.core.auth.dependencies import (
    get_auth_service, get_current_user, get_reset_manager, get_settings
)
from app.core.auth.reset import ResetTokenManager
from app.core.auth.schemas import (
    RegisterRequest, UserLogin, ForgotPasswordRequest, ResetPasswordRequest,
    TokenResponse, ProfileResponse, ForgotPasswordResponse, OAuthTokenResponse
)
from app.core.auth.service import AuthService
from app.shared.database.models import User
from app.shared.schemas.common import BaseResponse

router = APIRouter()


@router.post("/register", response_model=TokenResponse)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Registro de usuario

    **Returns:**
    - Token de sesión (7 días)
    - Perfil del usuario (sin contraseña)

    Email duplicado: 409 `DUPLICATE_EMAIL`.
    """
    return await auth_service.register(request)


@router.post("/login", response_model=TokenResponse)
async def login(
    user_login: UserLogin,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login con JSON

    **Body:**
    ```json
        {
            "email": "user@example.com",
            "password": "password123"
        }
    ```
    Email inexistente y contraseña incorrecta devuelven el mismo error.
    """
    return await auth_service.login(user_login.email, user_login.password)


@router.post("/token", response_model=OAuthTokenResponse)
async def login_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login OAuth2 (form data) para el botón Authorize de /docs

    - **username**: Email del usuario
    - **password**: Contraseña del usuario
    """
    result = await auth_service.login(form_data.username, form_data.password)
    return OAuthTokenResponse(access_token=result.token)


@router.get("/me", response_model=ProfileResponse)
def get_current_user_info(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Obtener información del usuario actual
    **Headers requeridos:**
    - Authorization: Bearer {token}
    """
    return ProfileResponse(success=True, user=auth_service.get_profile(current_user.id))


@router.post("/forgot-password", response_model=ForgotPasswordResponse, response_model_exclude_none=True)
def forgot_password(
    request: ForgotPasswordRequest,
    reset_manager: ResetTokenManager = Depends(get_reset_manager),
    settings: Settings = Depends(get_settings)
):
    """
    Generar token de reset de contraseña (válido 1 hora)

    Un nuevo pedido invalida el token anterior. El token solo se devuelve
    en la respuesta fuera de producción; el envío por email es externo.
    """
    ticket = reset_manager.request(request.email)
    return ForgotPasswordResponse(
        success=True,
        message="Password reset token generated",
        expires_at=ticket.expires_at,
        reset_token=ticket.token if settings.expose_reset_token else None
    )


@router.post("/reset-password", response_model=BaseResponse)
async def reset_password(
    request: ResetPasswordRequest,
    reset_manager: ResetTokenManager = Depends(get_reset_manager)
):
    """Consumir token de reset y fijar la nueva contraseña"""
    await reset_manager.consume(request.email, request.token, request.new_password)
    return BaseResponse(success=True, message="Password successfully reset")


@router.post("/logout", response_model=BaseResponse)
async def logout():
    """
    Logout (con JWT stateless, solo informativo)

    En el frontend debes eliminar el token del storage.
    """
    return BaseResponse(success=True, message="Logged out. Delete the token on the client.")
