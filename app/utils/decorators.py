from functools import wraps

from flask import current_app, session

from app.exceptions import AuthenticationError


def services():
    """Service bundle of the running app (see app.services.init.build_services)."""
    return current_app.extensions["carhire"]


def current_role():
    return session.get("role")


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            raise AuthenticationError()
        return fn(*args, **kwargs)

    return wrapper


def permission_required(module, action):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if "uid" not in session:
                raise AuthenticationError()
            services().policy.require(session.get("role"), module, action)
            return fn(*args, **kwargs)

        return wrapper

    return deco
