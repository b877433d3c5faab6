# Overview: Service-layer operations for user accounts; encapsulates business logic and database work.

"""
Authentication Service

WHY: Every entry belongs to a user, so every action must be attributable.
Uses bcrypt for password hashing.

ACCOUNT RULES:
- Usernames are unique case-insensitively and matched case-insensitively at login
- The default administrator (DEFAULT_ADMIN_USERNAME) cannot be deleted
- New accounts and reset passwords force a password change on next login

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12)
- Minimum 6 characters
- Session tokens managed separately (see session_service.py)
"""

import bcrypt
from flask import current_app
from ..extensions import db
from ..models import User, ROLE_ADMIN, ROLE_USER
from quinzena.time_utils import utcnow


MIN_PASSWORD_LENGTH = 6
ROLES = (ROLE_ADMIN, ROLE_USER)


class AuthError(ValueError):
    """Raised for invalid account operations."""
    pass


class PasswordValidationError(AuthError):
    """Raised when password doesn't meet requirements."""
    pass


class ProtectedUserError(AuthError):
    """Raised when an operation would remove the default administrator."""
    pass


class UsernameTakenError(AuthError):
    pass


class UserNotFoundError(AuthError):
    pass


def validate_password_strength(password: str) -> None:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt with cost factor 12.

    Password is validated before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    WHY timing-safe: bcrypt.checkpw() prevents timing attacks automatically.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


def default_admin_username() -> str:
    return current_app.config.get("DEFAULT_ADMIN_USERNAME", "ADM")


def is_protected(user: User) -> bool:
    return user.username.upper() == default_admin_username().upper()


def find_by_username(username: str) -> User | None:
    return db.session.query(User).filter(
        db.func.upper(User.username) == username.strip().upper()
    ).first()


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise UserNotFoundError("User not found")
    return user


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.username.asc()).all()


def create_user(
    username: str,
    password: str,
    name: str,
    role: str = ROLE_USER,
    is_first_login: bool = True,
) -> User:
    """
    Create new user with bcrypt password hashing.

    Raises:
        AuthError: If username or name is empty or role is unknown
        UsernameTakenError: If the username exists (case-insensitive)
        PasswordValidationError: If password doesn't meet requirements
    """
    username = (username or "").strip()
    name = (name or "").strip()
    if not username:
        raise AuthError("Username is required")
    if not name:
        raise AuthError("Name is required")
    if role not in ROLES:
        raise AuthError(f"Role must be one of: {', '.join(ROLES)}")

    if find_by_username(username):
        raise UsernameTakenError("Username already exists")

    user = User(
        username=username,
        name=name,
        password_hash=hash_password(password),
        role=role,
        is_first_login=is_first_login,
    )

    db.session.add(user)
    db.session.commit()
    return user


def ensure_default_admin() -> User:
    """Create the bootstrap administrator when no user exists yet."""
    existing = db.session.query(User).first()
    if existing:
        return find_by_username(default_admin_username()) or existing

    user = create_user(
        username=default_admin_username(),
        password=current_app.config.get("DEFAULT_ADMIN_PASSWORD", "123456"),
        name="Administrador",
        role=ROLE_ADMIN,
    )
    current_app.logger.info("Default admin user created: %s", user.username)
    return user


def authenticate(username: str, password: str) -> User | None:
    """
    Authenticate user with username and password.

    Returns User if credentials valid and the account is active, None otherwise.
    Updates last_login_at timestamp on successful authentication.
    """
    if not username or not password:
        return None

    user = find_by_username(username)
    if not user or not user.is_active:
        return None

    if verify_password(password, user.password_hash):
        user.last_login_at = utcnow()
        db.session.commit()
        return user

    return None


def change_password(user_id: int, new_password: str) -> User:
    """Set a new password chosen by the user; clears the first-login flag."""
    user = get_user(user_id)
    user.password_hash = hash_password(new_password)
    user.is_first_login = False
    db.session.commit()
    return user


def reset_password(user_id: int) -> User:
    """Admin reset to the default password; forces a change on next login."""
    user = get_user(user_id)
    user.password_hash = hash_password(current_app.config.get("DEFAULT_ADMIN_PASSWORD", "123456"))
    user.is_first_login = True
    db.session.commit()
    return user


def update_user(user_id: int, changes: dict) -> User:
    """
    Update name, role or active flag.

    The default administrator keeps its admin role and cannot be deactivated.
    """
    user = get_user(user_id)

    if "name" in changes:
        name = (changes["name"] or "").strip()
        if not name:
            raise AuthError("Name is required")
        user.name = name

    if "role" in changes:
        if changes["role"] not in ROLES:
            raise AuthError(f"Role must be one of: {', '.join(ROLES)}")
        if is_protected(user) and changes["role"] != ROLE_ADMIN:
            raise ProtectedUserError("Cannot change the role of the default administrator")
        user.role = changes["role"]

    if "is_active" in changes:
        is_active = bool(changes["is_active"])
        if is_protected(user) and not is_active:
            raise ProtectedUserError("Cannot deactivate the default administrator")
        user.is_active = is_active

    db.session.commit()
    return user


def delete_user(user_id: int) -> None:
    """
    Delete a user account and its sessions.

    Financial records are owned by user id only and are left in place.
    """
    user = get_user(user_id)
    if is_protected(user):
        raise ProtectedUserError("Cannot delete the default administrator")

    db.session.delete(user)
    db.session.commit()
