import logging
import sqlite3
import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

import config
from database import get_db
from exceptions import AuthError, ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SECRET_KEY = config.SECRET_KEY
ALGORITHM = config.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = config.ACCESS_TOKEN_EXPIRE_MINUTES

MIN_PASSWORD_LENGTH = 6

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def create_access_token(data: dict, expires_delta: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def decode_access_token(token: str):
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None

def verify_token(token: str):
    """Verify and decode JWT token, return payload if valid and its session is still open, None otherwise"""
    payload = decode_access_token(token)
    if not payload or not payload.get("jti"):
        return None
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT 1 FROM sessions WHERE id = ?", (payload["jti"],))
        if not cursor.fetchone():
            return None
    return payload

def validate_new_password(password: str, label: str = "Password"):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(f"{label} must be at least {MIN_PASSWORD_LENGTH} characters long")

def _get_user_row(user_id: int):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, email, password_hash FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        if row:
            return {"id": row[0], "email": row[1], "password_hash": row[2]}
        return None

def sign_up(username: str, email: str, password: str) -> dict:
    """Create the identity and its profile row in one transaction."""
    username = (username or "").strip()
    email = (email or "").strip()
    if not username:
        raise InvalidInputError("Username is required")
    if not email or "@" not in email:
        raise InvalidInputError("A valid email address is required")
    validate_new_password(password)

    hashed = hash_password(password)
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT 1 FROM profiles WHERE username = ?", (username,))
        if cursor.fetchone():
            raise ConflictError("Username already taken")
        cursor.execute("SELECT 1 FROM users WHERE email = ?", (email,))
        if cursor.fetchone():
            raise ConflictError("User already registered")
        try:
            cursor.execute("INSERT INTO users (email, password_hash) VALUES (?, ?)", (email, hashed))
            user_id = cursor.lastrowid
            # Auto-create default profile
            cursor.execute(
                "INSERT INTO profiles (id, username, email, bio) VALUES (?, ?, ?, ?)",
                (user_id, username, email, "")
            )
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError("User already registered") from e
        conn.commit()
    logger.info("Registered user %s (%s)", user_id, username)
    return {"id": user_id, "email": email}

def resolve_login_email(identifier: str) -> str:
    """Usernames are resolved to the account email; anything with an @ is used as-is."""
    if "@" in identifier:
        return identifier
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT email FROM profiles WHERE username = ?", (identifier,))
        row = cursor.fetchone()
    if not row or not row[0]:
        raise NotFoundError("Username not found")
    return row[0]

def create_session(user_id: int) -> str:
    jti = uuid.uuid4().hex
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("INSERT INTO sessions (id, user_id) VALUES (?, ?)", (jti, user_id))
        conn.commit()
    return create_access_token({"sub": str(user_id), "jti": jti})

def sign_in_with_password(email: str, password: str) -> dict:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, email, password_hash FROM users WHERE email = ?", (email,))
        row = cursor.fetchone()
    if not row or not verify_password(password, row[2]):
        raise AuthError("Invalid login credentials", 400)
    access_token = create_session(row[0])
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": {"id": row[0], "email": row[1]},
    }

def sign_in(identifier: str, password: str) -> dict:
    return sign_in_with_password(resolve_login_email(identifier.strip()), password)

def get_user(token: str) -> dict:
    payload = verify_token(token) if token else None
    if not payload:
        raise AuthError("Unauthorized")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthError("Invalid token payload")
    user = _get_user_row(user_id)
    if not user:
        raise AuthError("Unauthorized")
    return {"id": user["id"], "email": user["email"]}

def sign_out(token: str):
    payload = decode_access_token(token)
    if not payload or not payload.get("jti"):
        return
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM sessions WHERE id = ?", (payload["jti"],))
        conn.commit()

def sign_out_all() -> int:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM sessions")
        removed = cursor.rowcount
        conn.commit()
    logger.info("Revoked %d sessions", removed)
    return removed

def check_password(user_id: int, password: str) -> bool:
    user = _get_user_row(user_id)
    return bool(user) and verify_password(password, user["password_hash"])

def update_user_by_id(user_id: int, password: str = None, email: str = None):
    """Privileged identity update; callers are responsible for authorization."""
    if _get_user_row(user_id) is None:
        raise NotFoundError("User not found")
    with get_db() as conn:
        cursor = conn.cursor()
        if password is not None:
            validate_new_password(password)
            cursor.execute("UPDATE users SET password_hash = ? WHERE id = ?", (hash_password(password), user_id))
        if email is not None:
            email = email.strip()
            if not email or "@" not in email:
                raise InvalidInputError("A valid email address is required")
            try:
                cursor.execute("UPDATE users SET email = ? WHERE id = ?", (email, user_id))
            except sqlite3.IntegrityError as e:
                raise ConflictError("A user with this email address has already been registered") from e
        conn.commit()
