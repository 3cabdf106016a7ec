"""User API routes: signup, login, current user, update, delete."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from conduit.errors import NotFound
from conduit.models import User
from conduit.schemas import UserView
from conduit.services.auth_service import AuthService
from web.auth import get_auth_service, require_user

router = APIRouter(prefix="/api", tags=["users"])


class SignupUser(BaseModel):
    username: str
    email: str
    password: str


class SignupRequest(BaseModel):
    user: SignupUser


class LoginUser(BaseModel):
    email: str
    password: str


class LoginRequest(BaseModel):
    user: LoginUser


class UpdateUser(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    password: Optional[str] = None


class UpdateRequest(BaseModel):
    user: UpdateUser


class UserEnvelope(BaseModel):
    user: UserView


class UserSummary(BaseModel):
    id: int
    username: str
    email: str


@router.post("/users", response_model=UserEnvelope)
async def signup(body: SignupRequest, service: AuthService = Depends(get_auth_service)):
    """Create an account and return it with a fresh token."""
    view = await service.create_account(body.user.username, body.user.email, body.user.password)
    return UserEnvelope(user=view)


@router.post("/users/login", response_model=UserEnvelope)
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Authenticate by email and password. Unknown email and wrong password look the same."""
    user = await service.authenticate(body.user.email, body.user.password)
    if not user:
        raise NotFound("Invalid email or password", {"User": " not found"}, status_code=401)
    return UserEnvelope(user=service.build_view(user))


@router.get("/users", response_model=list[UserSummary])
async def list_users(service: AuthService = Depends(get_auth_service)):
    users = await service.list_users()
    return [UserSummary(id=u.id, username=u.username, email=u.email) for u in users]


@router.get("/user", response_model=UserEnvelope)
async def get_me(user: User = Depends(require_user), service: AuthService = Depends(get_auth_service)):
    """Get current authenticated user."""
    return UserEnvelope(user=await service.find_by_id(user.id))


@router.put("/user", response_model=UserEnvelope)
async def update_me(
    body: UpdateRequest,
    user: User = Depends(require_user),
    service: AuthService = Depends(get_auth_service),
):
    """Update the current user. Only the fields sent are changed."""
    view = await service.update(user.id, body.user.model_dump(exclude_unset=True))
    return UserEnvelope(user=view)


@router.delete("/users/{email}")
async def delete_user(
    email: str,
    user: User = Depends(require_user),
    service: AuthService = Depends(get_auth_service),
):
    """Delete the current user's account. Other users' accounts are off limits."""
    if email != user.email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot delete another user's account")
    return {"deleted": await service.delete_by_email(email)}
