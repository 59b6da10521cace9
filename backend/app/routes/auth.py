import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.core.cookies import clear_tokens, issue_tokens
from app.core.database import get_db
from app.core.deps import account_disabled, get_current_user, require_password_confirm
from app.core.errors import AppError
from app.core.roles import Role
from app.core.security import hash_password, password_change_timestamp, verify_password
from app.core.uploads import ensure_image, save_user_image
from app.models.user import User
from app.routes.schemas import UserOut


router = APIRouter()
logger = logging.getLogger(__name__)

SELF_UPDATABLE_FIELDS = {"name", "phone", "image"}


class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    password_confirm: str = Field(alias="passwordConfirm")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UpdatePasswordRequest(BaseModel):
    old_password: str = Field(alias="oldPassword")
    new_password: str = Field(alias="newPassword", min_length=6)
    new_password_confirm: str = Field(alias="newPasswordConfirm")


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class SignupResponse(TokenResponse):
    user: UserOut


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    email = _normalize_email(data.email)
    existing = db.query(User).filter(User.email == email).first()
    if existing and not existing.active:
        raise AppError(400, "BAD_REQUEST", f"The user with email {email} has been disabled.", {"email": email})
    if existing:
        raise AppError(400, "DUPLICATE_KEYS", "Email already exists.", {"email": email})
    if data.password != data.password_confirm:
        raise AppError(400, "INVALID_ARGUMENTS", "Passwords do not match.", {"passwordConfirm": data.password_confirm})

    user = User(
        name=data.name,
        email=email,
        hashed_password=hash_password(data.password),
        role=Role.customer.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("New customer signed up user_id=%s", user.id)

    access, refresh = issue_tokens(response, request, user.id)
    return SignupResponse(access_token=access, refresh_token=refresh, user=UserOut.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == _normalize_email(data.email)).first()
    if not user or not verify_password(data.password, user.hashed_password):
        logger.info("Failed login for email=%s", data.email)
        raise AppError(401, "INVALID_CREDENTIALS", "Incorrect email or password.")
    if not user.active:
        raise account_disabled()

    access, refresh = issue_tokens(response, request, user.id)
    return TokenResponse(access_token=access, refresh_token=refresh)


@router.post("/logout")
def logout(response: Response):
    clear_tokens(response)
    return {"status": "success"}


@router.get("/me", response_model=UserOut)
def get_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserOut)
async def update_me(request: Request, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise AppError(400, "INVALID_ARGUMENTS", "Request body is not valid JSON")
        if not isinstance(payload, dict):
            raise AppError(400, "INVALID_ARGUMENTS", "Request body must be a JSON object")
    else:
        payload = dict((await request.form()).items())

    for key in payload:
        if key not in SELF_UPDATABLE_FIELDS:
            raise AppError(400, "INVALID_ARGUMENTS", f"Updating {key} is not allowed", {"field": key})

    name: Optional[str] = payload.get("name")
    if name is not None:
        name = str(name).strip()
        if not name:
            raise AppError(400, "INVALID_ARGUMENTS", "Name cannot be empty", {"name": name})
        user.name = name
    if payload.get("phone") is not None:
        user.phone = str(payload["phone"]).strip() or None

    # Written last so a rejected request leaves nothing on disk
    image = payload.get("image")
    if isinstance(image, UploadFile):
        ensure_image(image)
        user.image = save_user_image(await image.read(), user.id)

    db.commit()
    db.refresh(user)
    return user


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(response: Response, user: User = Depends(require_password_confirm), db: Session = Depends(get_db)):
    user.active = False
    db.commit()
    clear_tokens(response)
    logger.info("User user_id=%s deactivated their account", user.id)


@router.patch("/update-password", response_model=TokenResponse)
def update_password(
    data: UpdatePasswordRequest,
    request: Request,
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not verify_password(data.old_password, user.hashed_password):
        raise AppError(401, "INVALID_CREDENTIALS", "Current password is incorrect.")
    if data.new_password != data.new_password_confirm:
        raise AppError(
            400, "INVALID_ARGUMENTS", "Passwords do not match.", {"newPasswordConfirm": data.new_password_confirm}
        )

    user.hashed_password = hash_password(data.new_password)
    user.password_changed_at = password_change_timestamp()
    db.commit()
    logger.info("Password changed for user_id=%s", user.id)

    access, refresh = issue_tokens(response, request, user.id)
    return TokenResponse(access_token=access, refresh_token=refresh)
