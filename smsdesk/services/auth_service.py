"""Authentication service: password hashing, session tokens and user lookups"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import hashlib
import hmac
import logging
import secrets

from jose import JWTError, jwt
from sqlalchemy import func
from sqlalchemy.orm import Session

from smsdesk.core.config import settings
from smsdesk.errors.exceptions import UnauthorizedException
from smsdesk.models.user import User
from smsdesk.schemas.auth_schemas import UserCreate

logger = logging.getLogger(__name__)

# scrypt parameters; stored hashes are "<hex derived key>.<hex salt>"
_SCRYPT_N = 16384
_SCRYPT_R = 8
_SCRYPT_P = 1
_KEY_LENGTH = 64


def _derive_key(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_KEY_LENGTH,
    )


def get_password_hash(password: str) -> str:
    """Hash a password with scrypt and a random 16-byte salt"""
    salt = secrets.token_hex(16)
    return f"{_derive_key(password, salt).hex()}.{salt}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored hash in constant time"""
    if not hashed_password or "." not in hashed_password:
        return False
    hashed, salt = hashed_password.split(".", 1)
    try:
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    return hmac.compare_digest(expected, _derive_key(plain_password, salt))


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the naive DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ── session tokens ────────────────────────────────────────────────────────────

def create_session_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create the signed token stored in the session cookie.

    The ``sv`` claim pins the token to the user's current session version so
    that :func:`revoke_sessions` can invalidate it before it expires.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "sv": user.session_version or 0,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> Optional[Tuple[int, int]]:
    """
    Return ``(user_id, session_version)`` carried by *token*, or None when it
    is invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info(f"Session token rejected: {str(e)}")
        return None

    user_id_str = payload.get("sub")
    if user_id_str is None:
        return None
    try:
        return int(user_id_str), int(payload.get("sv", 0))
    except (ValueError, TypeError):
        return None


def revoke_sessions(db: Session, user: User, commit: bool = True) -> User:
    """Invalidate every session token issued to *user* so far"""
    user.session_version = (user.session_version or 0) + 1
    if commit:
        db.commit()
        db.refresh(user)
    logger.info(f"Sessions revoked: user_id={user.id}, version={user.session_version}")
    return user


# ── users ─────────────────────────────────────────────────────────────────────

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """
    Get user by username, ignoring case
    """
    return db.query(User).filter(func.lower(User.username) == username.strip().lower()).first()


def get_user_by_phone(db: Session, phone: str) -> Optional[User]:
    """
    Get user by phone number
    """
    return db.query(User).filter(User.phone == phone).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def authenticate_user(db: Session, username: str, password: str) -> User:
    """
    Authenticate a user with username and password.

    Unknown users and wrong passwords share one message; a disabled account
    gets its own.
    """
    user = get_user_by_username(db, username)
    if not user:
        raise UnauthorizedException(detail="Invalid username or password")
    if not user.is_active:
        raise UnauthorizedException(detail="Account is disabled")
    if not verify_password(password, user.password):
        raise UnauthorizedException(detail="Invalid username or password")

    user.last_activity = utcnow()
    db.commit()
    db.refresh(user)
    return user


def create_user(db: Session, user_data: UserCreate, is_admin: bool = False) -> User:
    """
    Create a new user with hashed password and the starting credit balance
    """
    db_user = User(
        username=user_data.username,
        password=get_password_hash(user_data.password),
        full_name=user_data.full_name,
        phone=user_data.phone,
        messages_remaining=settings.INITIAL_CREDITS,
        messages_sent=0,
        is_admin=is_admin,
        is_active=True,
        last_activity=utcnow(),
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    logger.info(f"User created: id={db_user.id}, username={db_user.username}, admin={is_admin}")
    return db_user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    """
    Replace *user*'s password; ValueError when *current_password* is wrong.

    Every session issued under the old password is revoked in the same commit.
    """
    if not verify_password(current_password, user.password):
        raise ValueError("Current password is incorrect")
    user.password = get_password_hash(new_password)
    revoke_sessions(db, user, commit=False)
    db.commit()
    db.refresh(user)
