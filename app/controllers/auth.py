from flask import Blueprint, jsonify, request, session

from ..utils.decorators import login_required, services

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/login")
def login_submit():
    body = request.get_json(silent=True) or {}
    user = services().users.authenticate(body.get("email", ""), body.get("password", ""))

    session.clear()
    session["uid"] = user.id
    session["role"] = user.role
    session["email"] = user.email

    return jsonify(success=True, message="Logged in", data={
        "user": user.to_dict(),
        "modules": services().policy.user_modules(user.role),
    })


@bp.post("/logout")
def logout():
    session.clear()
    return jsonify(success=True, message="Logged out")


@bp.get("/me")
@login_required
def me():
    user = services().users.get_user(session["uid"])
    if user is None:
        session.clear()
        return jsonify(success=False, message="User not found"), 401
    return jsonify(success=True, data={
        "user": user.to_dict(),
        "modules": services().policy.user_modules(user.role),
    })
