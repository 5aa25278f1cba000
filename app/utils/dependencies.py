from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from typing import Optional

from database.init import get_db
from database.models.user_model import User
from config import ALGORITHM, SECRET_KEY, ACCESS_TOKEN_EXPIRE_MINUTES
from enums.role_name import RoleName
from services import role_service
from services.tenant_service import TenantService
from utils.clock import Clock, get_clock

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/signin")
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password):
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email = payload.get("sub")
        if email is None:
            raise HTTPException(status_code=401, detail="Invalid credentials")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid provided token")

    user = db.query(User).filter_by(email=email).first()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    return user


def role_required(role: RoleName):
    """Build a dependency that only lets users holding ``role`` through"""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not role_service.has_role(current_user, role):
            raise HTTPException(
                status_code=403,
                detail=f"Only users with the {role} role can access this endpoint",
            )
        return current_user

    return dependency


owner_required = role_required(RoleName.OWNER)
tenant_required = role_required(RoleName.TENANT)


def get_current_tenant(
    current_user: User = Depends(tenant_required),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """The signed-in tenant's active tenancy"""
    tenant = TenantService().get_tenant_for_user(db, current_user.id, clock)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant profile not found")
    return tenant
