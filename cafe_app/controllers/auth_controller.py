import logging

from sqlalchemy.exc import SQLAlchemyError

from cafe_app.extensions import db
from cafe_app.models.role import Role
from cafe_app.models.user import User
from cafe_app.utils.auth import create_token, check_password_hash, hash_password
from cafe_app.utils.enums import RoleName
from cafe_app.utils.http import ok, error, json_body

logger = logging.getLogger(__name__)


def _user_payload(user, role_name):
    return {"id": user.id, "name": user.name, "email": user.email, "role": role_name}


def login_handler():
    data = json_body()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        return error("VALIDATION_ERROR", "email and password required", 400)

    user = User.query.filter_by(email=email).first()
    if not user or not user.password or not check_password_hash(user.password, password):
        return error("INVALID_CREDENTIALS", "Email or password incorrect", 401)
    if not user.is_active:
        return error("ACCOUNT_DISABLED", "Account is disabled", 403)

    role_name = user.role.name if user.role else ""
    token = create_token(user.id, role_name)
    return ok({"token": token, "user": _user_payload(user, role_name)})


def register_handler():
    data = json_body()
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        return error("VALIDATION_ERROR", "email and password required", 400)
    if len(password) < 6:
        return error("VALIDATION_ERROR", "password must be at least 6 characters", 400)
    exists = User.query.filter_by(email=email).first()
    if exists:
        return error("EMAIL_IN_USE", "email already registered", 409)
    try:
        # Self-registered accounts are plain voters
        role = Role.query.filter_by(name=RoleName.USER.value).first()
        user = User(name=name, email=email, password=hash_password(password), role=role)
        db.session.add(user)
        db.session.commit()
        role_name = user.role.name if user.role else ""
        token = create_token(user.id, role_name)
        return ok({"token": token, "user": _user_payload(user, role_name)}, 201)
    except SQLAlchemyError:
        db.session.rollback()
        logger.error("Store failure in register (email=%s)", email, exc_info=True)
        return error("UNKNOWN_ERROR", "Failed to register", 500)
