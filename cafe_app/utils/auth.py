import datetime as dt
from functools import wraps
from flask import request, current_app
import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from cafe_app.extensions import db
from cafe_app.models.user import User
from cafe_app.utils.enums import CAFE_MANAGER_ROLES
from cafe_app.utils.errors import NotAuthenticatedError, NotAuthorizedError
from cafe_app.utils.http import cafe_error


def hash_password(plain: str) -> str:
    return generate_password_hash(plain)


def create_token(user_id: int, role: str) -> str:
    ttl = current_app.config.get("TOKEN_TTL_HOURS", 12)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": int(dt.datetime.utcnow().timestamp()),
        "exp": int((dt.datetime.utcnow() + dt.timedelta(hours=ttl)).timestamp()),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_token(token: str):
    return jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])


def _authenticate():
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise NotAuthenticatedError("Missing Bearer token")
    token = auth_header.split(" ", 1)[1]
    try:
        payload = decode_token(token)
        request.user_id = int(payload["sub"])  # type: ignore
        request.user_role = payload.get("role")  # type: ignore
    except (jwt.PyJWTError, KeyError, ValueError):
        raise NotAuthenticatedError("Invalid token")

    # A token is honoured only while its account exists and is active
    user = db.session.get(User, request.user_id)  # type: ignore
    if user is None or not user.is_active:
        raise NotAuthenticatedError("Account is disabled")


def require_auth(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            _authenticate()
        except NotAuthenticatedError as e:
            return cafe_error(e)
        return f(*args, **kwargs)
    return wrapper


def require_roles(*roles):
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                _authenticate()
                if request.user_role not in roles:  # type: ignore
                    raise NotAuthorizedError()
            except (NotAuthenticatedError, NotAuthorizedError) as e:
                return cafe_error(e)
            return f(*args, **kwargs)
        return wrapper
    return decorator


# Chef-side endpoints: ADMIN or CAFE
require_cafe_manager = require_roles(*CAFE_MANAGER_ROLES)

__all__ = [
    "hash_password",
    "create_token",
    "require_auth",
    "require_roles",
    "require_cafe_manager",
    "check_password_hash",
]
