import logging

from sqlalchemy.orm import Session

from database.models import User
from enums.role_name import RoleName
from schemas.auth_schema import UserCreate, UserUpdate, PasswordUpdate
from services import role_service
from utils.dependencies import hash_password, verify_password
from utils.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)


def create_user(payload: UserCreate, db: Session) -> User:
    if get_user_by_email(payload.email, db):
        raise ConflictError("User already exists")

    user = User(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        hashed_password=hash_password(payload.password),
        is_active=True,
    )
    db.add(user)
    role_service.add_role(user, RoleName.USER, db)
    if payload.account_type == "owner":
        role_service.add_role(user, RoleName.OWNER, db)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s as %s", user.id, payload.account_type)
    return user


def authenticate(email: str, password: str, db: Session):
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def get_user_by_email(email: str, db: Session):
    return db.query(User).filter_by(email=email).first()


def get_user_by_id(user_id: int, db: Session):
    return db.query(User).filter(User.id == user_id).first()


def update_user(user: User, payload: UserUpdate, db: Session) -> User:
    if payload.email and payload.email.lower() != user.email.lower():
        if get_user_by_email(payload.email, db):
            raise ConflictError(f"Email {payload.email} is already in use")
        user.email = payload.email
    if payload.name:
        user.name = payload.name
    if payload.phone is not None:
        user.phone = payload.phone
    db.commit()
    db.refresh(user)
    return user


def change_password(user: User, payload: PasswordUpdate, db: Session) -> User:
    if not verify_password(payload.current_password, user.hashed_password):
        raise ValidationError("Current password is incorrect.", field="current_password")
    if payload.new_password != payload.confirm_password:
        raise ValidationError(
            "New password and confirmation do not match.", field="confirm_password"
        )
    user.hashed_password = hash_password(payload.new_password)
    db.commit()
    return user
