"""
User Routes

POST /user/auth/create - Register (multipart, optional `file` = profile image)
POST /user/auth/login - Login, sets the `token` cookie
GET /user/logout - Clear the `token` cookie
PUT /user/profile/update - Update own profile (multipart, optional `file`)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from jobboard.core.auth import (
    CurrentUser,
    clear_auth_cookie,
    create_access_token,
    get_current_user,
    set_auth_cookie,
)
from jobboard.core.errors import BadRequestError
from jobboard.schemas.schemas import LoginRequest, Profile, UserCreate, success_response
from jobboard.services.storage_service import ObjectStorage, get_object_storage
from jobboard.services.user_service import UserService, public_user
from jobboard.utils.file_upload import read_upload

router = APIRouter(prefix="/user", tags=["Users"])


def parse_profile(raw: Optional[str]) -> Optional[Profile]:
    """The profile form field carries a JSON object."""
    if not raw:
        return None
    return Profile.model_validate_json(raw)


@router.post("/auth/create", status_code=201)
async def register(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    profile: Optional[str] = Form(None, description="JSON-encoded profile object"),
    file: Optional[UploadFile] = File(None, description="Profile image"),
    storage: ObjectStorage = Depends(get_object_storage),
):
    """Register a new job seeker (`user`) or `recruiter`."""
    if not all([name, email, phone, password, role]):
        raise BadRequestError("All fields are required")

    data = UserCreate(
        name=name,
        email=email,
        phone=phone,
        password=password,
        role=role,
        profile=parse_profile(profile) or Profile(),
    )
    upload = await read_upload(file)

    user = UserService().register(data, upload, storage)
    return success_response("User created successfully", user)


@router.post("/auth/login")
async def login(request: LoginRequest, response: Response):
    """
    Login with email, password and the role the account was created with.

    The JWT is delivered as an http-only cookie named `token`.
    """
    user = UserService().authenticate(request.email, request.password, request.role)

    token = create_access_token(data={"sub": str(user["_id"])})
    set_auth_cookie(response, token)

    return success_response(f"Welcome, {user['name']}", public_user(user))


@router.get("/logout")
async def logout(response: Response):
    clear_auth_cookie(response)
    return success_response("Logged out successfully")


@router.put("/profile/update")
async def update_profile(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    profile: Optional[str] = Form(None, description="JSON-encoded partial profile"),
    file: Optional[UploadFile] = File(None, description="Profile image or resume"),
    user: CurrentUser = Depends(get_current_user),
    storage: ObjectStorage = Depends(get_object_storage),
):
    """
    Update own profile. Only provided fields change.

    Images become the profile image; documents become the resume.
    """
    upload = await read_upload(file)
    updated = UserService().update_profile(
        user.user_id,
        name=name,
        email=email,
        phone=phone,
        profile=parse_profile(profile),
        upload=upload,
        storage=storage,
    )
    return success_response("Profile updated successfully", updated)
