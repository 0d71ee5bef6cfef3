import logging
from typing import Optional

from cafe_app.extensions import db
from cafe_app.models.role import Role
from cafe_app.models.user import User
from cafe_app.utils.auth import hash_password
from cafe_app.utils.enums import RoleName

logger = logging.getLogger(__name__)


def create_admin(email: str, password: str, name: Optional[str] = "Admin User") -> bool:
    """Ensure an ADMIN account exists for ``email``.

    Creates the ADMIN role first when missing. An existing account is left
    untouched. Returns True when a user was created.
    """
    email = email.strip().lower()
    admin_role = Role.query.filter_by(name=RoleName.ADMIN.value).first()
    if not admin_role:
        admin_role = Role(name=RoleName.ADMIN.value, description="Administrator with full access")
        db.session.add(admin_role)
        logger.info("Created ADMIN role")

    if User.query.filter_by(email=email).first():
        db.session.commit()
        logger.info("Admin user %s already exists", email)
        return False

    db.session.add(User(name=name, email=email, password=hash_password(password), role=admin_role))
    db.session.commit()
    logger.info("Created admin user %s", email)
    return True
