from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask import current_app, g
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from books_service.errors import AuthenticationError, AuthorizationError


@dataclass(frozen=True)
class Identity:
    id: int | None
    role: str | None


def _is_authenticated(identity: Identity) -> bool:
    return True


def _is_admin(identity: Identity) -> bool:
    return identity.role == current_app.config["ADMIN_ROLE"]


def _has_own_id(identity: Identity) -> bool:
    return identity.id is not None


# capability -> (predicate over the caller, error raised when it fails)
POLICIES = {
    "catalog:read": (_is_authenticated, AuthorizationError),
    "catalog:write": (_is_admin, AuthorizationError),
    "borrowings:manage": (_is_admin, AuthorizationError),
    "borrowings:own": (_has_own_id, AuthenticationError),
}


def current_identity() -> Identity:
    return g.identity


def _load_identity() -> Identity:
    raw_id = get_jwt_identity()
    try:
        user_id = int(raw_id) if raw_id is not None else None
    except (TypeError, ValueError):
        user_id = None
    role = (get_jwt() or {}).get(current_app.config["JWT_ROLE_CLAIM"])
    return Identity(id=user_id, role=role)


def permission_required(capability: str):
    policy, error_cls = POLICIES[capability]

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            identity = _load_identity()
            if not policy(identity):
                current_app.logger.warning(
                    f"[auth] Denied {capability} for user={identity.id} role={identity.role}"
                )
                if error_cls is AuthenticationError:
                    raise AuthenticationError("Token does not identify a user")
                raise AuthorizationError("Forbidden")
            g.identity = identity
            return fn(*args, **kwargs)
        return wrapper
    return decorator
