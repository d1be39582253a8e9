"""
Signup / login.

Passwords are stored as bcrypt hashes. Users saved by older versions of the
store carry a plaintext ``password`` field; those are accepted once on login
and rewritten with a hash.
"""
import hmac
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from database import JsonDatabase
from errors import AuthError, ConflictError, ValidationError
from schemas import LoginRequest, SignupRequest, User, UserOut

logger = logging.getLogger("quantum_build")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
_email_adapter = TypeAdapter(EmailStr)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by ``token``."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthError("Could not validate credentials")
    user_id = payload.get("sub")
    if user_id is None:
        raise AuthError("Could not validate credentials")
    return user_id


def _same_email(a: Optional[str], b: str) -> bool:
    return (a or "").strip().lower() == b


def signup(db: JsonDatabase, body: SignupRequest) -> UserOut:
    name = (body.name or "").strip()
    raw_email = (body.email or "").strip()
    if not name or not raw_email or not body.password:
        raise ValidationError("All fields are required")
    try:
        email = _email_adapter.validate_python(raw_email).lower()
    except PydanticValidationError:
        raise ValidationError("Invalid email address")

    # check-then-append under the database lock so one process can't double-register
    with db.lock:
        if db.find_one("users", lambda u: _same_email(u.get("email"), email)):
            raise ConflictError("User already exists")
        user = User(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            password_hash=get_password_hash(body.password),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        db.create_document("users", user.model_dump())
    logger.info("New user signed up: %s", email)
    return UserOut(name=user.name, email=user.email)


def authenticate(db: JsonDatabase, body: LoginRequest) -> dict:
    if not body.email or not body.password:
        raise ValidationError("Email and password required")
    email = body.email.strip().lower()
    record = db.find_one("users", lambda u: _same_email(u.get("email"), email))
    if record is None or not _check_password(db, record, body.password):
        logger.warning("Failed login for %s", email)
        raise AuthError("Invalid credentials")
    return record


def _check_password(db: JsonDatabase, record: dict, password: str) -> bool:
    hashed = record.get("password_hash")
    if hashed:
        return verify_password(password, hashed)
    legacy = record.get("password")
    if legacy is None or not hmac.compare_digest(str(legacy).encode(), password.encode()):
        return False
    logger.warning("Upgrading plaintext password for user %s", record.get("id"))
    record["password_hash"] = get_password_hash(password)
    record.pop("password", None)

    def same_user(u):
        return u.get("id") == record.get("id") and u.get("email") == record.get("email")

    db.update_document("users", same_user, {"password_hash": record["password_hash"]}, drop=("password",))
    return True


def login(db: JsonDatabase, body: LoginRequest) -> dict:
    record = authenticate(db, body)
    token = create_access_token({"sub": str(record.get("id"))})
    return {
        "message": "Login successful",
        "user": UserOut(name=record.get("name", ""), email=record["email"]).model_dump(),
        "access_token": token,
        "token_type": "bearer",
    }


def get_user(db: JsonDatabase, user_id: str) -> dict:
    record = db.find_one("users", lambda u: str(u.get("id")) == user_id)
    if record is None:
        raise AuthError("Could not validate credentials")
    return record
