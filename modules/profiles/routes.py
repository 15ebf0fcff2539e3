"""
Profile API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.middleware.auth import get_current_user
from api.dependencies import get_profile_service
from shared.models import AuthenticatedUser

from .interfaces import IProfileService
from .models import CreateProfileRequest, ProfileUpdate, UserProfile
from .exceptions import ProfileAlreadyExistsError, ProfileNotFoundError

router = APIRouter()


@router.post("", response_model=UserProfile, status_code=201)
async def create_profile(
    request: CreateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> UserProfile:
    """
    Create the current user's profile.

    Called once after sign-up. Email is taken from the token, and so is
    the photo unless the request supplies one.
    """
    try:
        return await service.create_profile(
            user.id,
            user.id,
            email=user.email,
            display_name=request.display_name,
            photo_url=str(request.photo_url) if request.photo_url else user.avatar_url,
        )
    except ProfileAlreadyExistsError:
        raise HTTPException(status_code=409, detail="Profile already exists")


@router.get("/me", response_model=UserProfile)
async def get_my_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> UserProfile:
    """
    Get the current user's profile, including matchmaking state.
    """
    try:
        return await service.get_profile(user.id, user.id)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")


@router.patch("/me", response_model=UserProfile)
async def update_my_profile(
    update: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> UserProfile:
    """
    Update display name, bio, proficiency level or photo.
    """
    try:
        return await service.update_profile(user.id, user.id, update)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")
