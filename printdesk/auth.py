"""Operator authentication for printdesk.

Operator identity lives in the Flask session as ``user_id``. Views that need
an operator receive it explicitly through the ``operator`` keyword argument.
"""

import logging
from functools import wraps

from flask import g, session
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import UnauthorizedError
from .models import User
from .store import user_store

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"

# Compared against when the username is unknown so both failure paths do the same work.
_DUMMY_HASH = generate_password_hash("printdesk-unknown-user")


def authenticate(username: str, password: str) -> User:
    """Verify operator credentials.
    
    Args:
        username: Submitted username.
        password: Submitted password.
        
    Returns:
        The matching User.
        
    Raises:
        UnauthorizedError: With the same message whether the user is unknown
            or the password is wrong.
    """
    user = user_store.get_by_username(username) if username else None
    if user is None:
        check_password_hash(_DUMMY_HASH, password or "")
        logger.info(f"Failed login for unknown operator {username!r}")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not user.check_password(password or ""):
        logger.info(f"Failed login for operator {username!r}")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return user


def login_operator(user: User) -> None:
    """Establish an operator session."""
    session.clear()
    session["user_id"] = user.id
    g._current_operator = user
    logger.info(f"Operator {user.username} logged in")


def logout_operator() -> None:
    """Drop the operator session, if any."""
    user_id = session.get("user_id")
    session.clear()
    g._current_operator = None
    if user_id is not None:
        logger.info(f"Operator {user_id} logged out")


def get_current_operator() -> User | None:
    """Get the current authenticated operator from the session.
    
    Returns:
        The User instance if authenticated, None otherwise.
    """
    if hasattr(g, "_current_operator"):
        return g._current_operator
    
    user_id = session.get("user_id")
    user = user_store.get(user_id) if user_id is not None else None
    g._current_operator = user
    return user


def require_operator(operator: User | None) -> User:
    """Raise UnauthorizedError unless an operator is present."""
    if operator is None:
        raise UnauthorizedError()
    return operator


def operator_required(f):
    """Decorator to require an operator session for a route.
    
    Anonymous requests get a 401 JSON response. Authenticated requests call
    the view with the operator as the ``operator`` keyword argument.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        operator = require_operator(get_current_operator())
        return f(*args, operator=operator, **kwargs)
    return decorated_function
