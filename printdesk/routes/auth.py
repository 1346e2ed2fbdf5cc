"""Operator session routes for printdesk."""

from flask import Blueprint, jsonify, request

from ..auth import authenticate, login_operator, logout_operator, operator_required
from ..errors import UnauthorizedError
from ..models import User

auth_bp = Blueprint("auth", __name__, url_prefix="/api/admin")


@auth_bp.post("/login")
def login():
    """Check operator credentials and start a session.
    
    Unknown usernames and wrong passwords get the same 401 response.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    username = payload.get("username")
    password = payload.get("password")
    if not isinstance(username, str) or not isinstance(password, str):
        raise UnauthorizedError("Invalid username or password")
    
    user = authenticate(username.strip(), password)
    login_operator(user)
    return jsonify(user.to_dict())


@auth_bp.post("/logout")
def logout():
    """End the operator session."""
    logout_operator()
    return jsonify({"message": "Logged out successfully"})


@auth_bp.get("/me")
@operator_required
def me(operator: User):
    """Return the logged-in operator."""
    return jsonify(operator.to_dict())
