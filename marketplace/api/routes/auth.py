from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marketplace.core.errors import Outcome
from marketplace.core.responses import envelope, respond
from marketplace.core.security import get_current_user
from marketplace.db.base import get_db
from marketplace.db.models.user import User
from marketplace.schemas.user import LoginRequest, ProviderResponse, UserCreate, UserResponse
from marketplace.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])


def _session(outcome: Outcome) -> Outcome:
    if not outcome.ok:
        return outcome
    return Outcome.success({
        "user": UserResponse.model_validate(outcome.value["user"]),
        "token": outcome.value["token"],
        "token_type": "bearer",
    })


@router.post("/register")
def register(payload: UserCreate, db: Session = Depends(get_db)):
    outcome = AccountService(db).register(payload)
    return respond(_session(outcome), "User registered successfully", status_code=status.HTTP_201_CREATED)


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    outcome = AccountService(db).login(payload.email, payload.password)
    return respond(_session(outcome), "Login successful")


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    data = {"user": UserResponse.model_validate(current_user)}
    if current_user.provider_profile:
        data["provider"] = ProviderResponse.model_validate(current_user.provider_profile)
    return envelope("User retrieved successfully", data)
