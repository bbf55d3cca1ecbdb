from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
from datetime import datetime
import bcrypt

from src.db.core import UserDB, ConflictError
from src.models.user import UserRegister
from src.logging_config import get_logger

logger = get_logger(__name__)


# ===== PASSWORD HASHING UTILITIES =====

# bcrypt only uses the first 72 bytes; newer releases raise instead of truncating
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with a per-password bcrypt salt"""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode('utf-8'))


# Unknown emails are checked against this so both failure paths cost one bcrypt round
_DUMMY_HASH = hash_password("not-a-real-account-password")


# ===== DATABASE OPERATIONS =====

def read_db_user_by_email(db: Session, email: str) -> Optional[UserDB]:
    return db.query(UserDB).filter(UserDB.email == email.lower().strip()).first()


def create_db_user(db: Session, user_data: UserRegister) -> UserDB:
    """
    Register a new user.

    Raises ConflictError when the email is taken, either by the lookup or by
    the unique constraint when two registrations race.
    """
    if read_db_user_by_email(db, user_data.email):
        raise ConflictError("Email already registered")

    db_user = UserDB(
        full_name=user_data.full_name,
        email=user_data.email,
        password_hash=hash_password(user_data.password),
        created_at=datetime.utcnow(),
    )

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email already registered") from e

    logger.info(f"Registered user {db_user.user_id}")
    return db_user


def authenticate_user(db: Session, email: str, password: str) -> Optional[UserDB]:
    """Return the user when email and password match, otherwise None"""
    user = read_db_user_by_email(db, email)
    if not user:
        verify_password(password, _DUMMY_HASH)
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user
