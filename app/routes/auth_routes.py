import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from schemas.auth_schema import (
    LoginRequest,
    PasswordUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from services.auth_service import authenticate, change_password, create_user, update_user
from utils.dependencies import create_access_token, get_current_user
from utils.errors import ServiceError
from responses.success import created_response, data_response, success_response
from responses.error import (
    internal_server_error,
    service_error_response,
    unauthorized_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def token_payload(user: User) -> dict:
    return {
        "access_token": create_access_token({"sub": user.email}),
        "token_type": "bearer",
        "user": UserResponse.model_validate(user).model_dump(mode="json"),
    }


@router.post("/signup")
def signup(payload: UserCreate, db: Session = Depends(get_db)):
    try:
        user = create_user(payload, db)
        return created_response(token_payload(user))
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to register user")
        return internal_server_error(f"Failed to register user: {str(e)}")


@router.post("/signin")
def signin(credentials: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = authenticate(credentials.email, credentials.password, db)
        if not user:
            return unauthorized_error("Invalid credentials")
        if not user.is_active:
            return unauthorized_error("Account is disabled")
        return data_response(token_payload(user))
    except Exception as e:
        logger.exception("Sign in failed")
        return internal_server_error(str(e))


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    """Any authenticated user reads their own profile"""
    return data_response(UserResponse.model_validate(current_user).model_dump(mode="json"))


@router.patch("/me")
def update_me(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        user = update_user(current_user, payload, db)
        return data_response(UserResponse.model_validate(user).model_dump(mode="json"))
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to update user %s", current_user.id)
        return internal_server_error(f"Failed to update user: {str(e)}")


@router.patch("/password")
def update_password(
    payload: PasswordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Any authenticated user changes their own password"""
    try:
        change_password(current_user, payload, db)
        return success_response("Password updated successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to change password for user %s", current_user.id)
        return internal_server_error(str(e))
