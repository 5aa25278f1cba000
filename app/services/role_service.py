import logging

from sqlalchemy.orm import Session

from database.models.user_model import Role, User
from enums.role_name import RoleName

logger = logging.getLogger(__name__)


def get_role_by_name(name: str, db: Session):
    return db.query(Role).filter(Role.name == str(name)).first()


def get_or_create_role(name: str, db: Session) -> Role:
    role = get_role_by_name(name, db)
    if role is None:
        role = Role(name=str(name))
        db.add(role)
        db.flush()
    return role


def has_role(user: User, name: str) -> bool:
    return str(name) in user.role_names


def add_role(user: User, name: str, db: Session) -> bool:
    """Grant a role; returns False when the user already holds it. Does not commit."""
    if has_role(user, name):
        return False
    user.roles.append(get_or_create_role(name, db))
    logger.info("Granted role %s to user %s", name, user.id)
    return True


def remove_role(user: User, name: str) -> bool:
    """Revoke a role; returns False when the user did not hold it. Does not commit."""
    for role in list(user.roles):
        if role.name == str(name):
            user.roles.remove(role)
            logger.info("Revoked role %s from user %s", name, user.id)
            return True
    return False


def ensure_default_roles(db: Session):
    for name in RoleName:
        get_or_create_role(name, db)
    db.commit()
