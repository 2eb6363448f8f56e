"""Registration and login."""

import logging
from datetime import time

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.core.errors import ErrorKind, Outcome
from marketplace.core.security import create_access_token, hash_password, verify_password
from marketplace.db.models.provider import ServiceProvider
from marketplace.db.models.user import User
from marketplace.domain.policy import PROVIDER
from marketplace.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def email_taken() -> Outcome:
    return Outcome.fail(
        ErrorKind.VALIDATION,
        "Registration failed. Email already exists.",
        "email",
        "This email is already registered",
    )


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, data: UserCreate) -> Outcome:
        """Create the user and, for providers, the provider profile in one transaction."""
        if self.db.query(User).filter(User.email == data.email).first():
            return email_taken()

        user = User(
            email=data.email,
            name=data.name,
            password_hash=hash_password(data.password),
            role=data.role,
            phone=data.phone,
            status="active",
        )
        try:
            self.db.add(user)
            self.db.flush()
            if data.role == PROVIDER:
                self.db.add(
                    ServiceProvider(
                        user_id=user.id,
                        category=data.category or f"{data.name}'s Services",
                        description=data.description or "Service provider",
                        hourly_rate=data.hourly_rate or 0,
                        availability=list(data.availability or []),
                        work_day_start=data.work_day_start or time(8, 0),
                        work_day_end=data.work_day_end or time(18, 0),
                        status="active",
                    )
                )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return email_taken()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(user)
        logger.info(f"Registered user {user.id} as {user.role}")
        return Outcome.success({"user": user, "token": create_access_token({"sub": str(user.id)})})

    def login(self, email: str, password: str) -> Outcome:
        user = self.db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.password_hash):
            return Outcome.fail(ErrorKind.VALIDATION, "Invalid credentials", "email", "These credentials do not match our records")

        if user.status != "active":
            return Outcome.fail(
                ErrorKind.VALIDATION,
                "Account is not active",
                "email",
                "Your account is not active. Please contact support.",
            )

        logger.info(f"User {user.id} logged in")
        return Outcome.success({"user": user, "token": create_access_token({"sub": str(user.id)})})
