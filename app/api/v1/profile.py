from fastapi import APIRouter, Depends

from app.core.auth.dependencies import get_auth_service, get_current_user
from app.core.auth.schemas import ProfileUpdateRequest, ProfileResponse
from app.core.auth.service import AuthService
from app.shared.database.models import User

router = APIRouter()


@router.get("", response_model=ProfileResponse)
def get_profile(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Perfil del usuario autenticado"""
    return ProfileResponse(success=True, user=auth_service.get_profile(current_user.id))


@router.put("", response_model=ProfileResponse)
def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Actualizar perfil (parcial)

    Solo se modifican los campos enviados. Email y contraseña no se cambian aquí.
    """
    user = auth_service.update_profile(current_user.id, request)
    return ProfileResponse(success=True, message="Profile updated successfully", user=user)
