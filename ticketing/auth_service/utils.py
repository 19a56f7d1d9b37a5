"""
Shared authentication helpers.
Provides password hashing and JWT creation/verification.
"""

import os
import jwt
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from dotenv import load_dotenv

from ticketing.errors import InvalidToken

# Load .env only once here
load_dotenv()

# Load secrets & configs
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET is missing. Set it in .env")

JWT_ALGORITHM = "HS256"
TOKEN_EXPIRATION_MINUTES = 60

# Fixed cost parameters so every stored digest is comparable
ph = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)

# Verified against when a login email has no account
DUMMY_PASSWORD_HASH = ph.hash("dummy-password-for-unknown-users")


# --- PASSWORDS ---
def hash_password(password: str) -> str:
    """
    Hash a plaintext password with Argon2id (salted, slow).

    Args:
        password (str): The plaintext password.

    Returns:
        str: Encoded hash including salt and parameters.
    """
    if not password:
        raise ValueError("password must not be blank")
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plaintext password against a stored Argon2 hash.

    Returns:
        bool: True on match. Any mismatch or malformed hash gives False.
    """
    if not password or not password_hash:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


# --- JWT CREATION ---
def create_token(user_id: int, email: str) -> str:
    """
    Generates a new JWT for a given user.

    Args:
        user_id (int): The unique ID of the user.
        email (str): The user's email address.

    Returns:
        str: Encoded JWT string, valid for one hour.
    """
    now = datetime.now(timezone.utc)

    payload = {
        "id": user_id,
        "email": email,
        "exp": now + timedelta(minutes=TOKEN_EXPIRATION_MINUTES),
    }

    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


# --- JWT VALIDATION ---
def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify a JWT's signature and expiry and return its claims.

    Raises:
        InvalidToken: Bad signature, malformed, expired, or no "id" claim.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token expired")
    except jwt.InvalidTokenError:
        raise InvalidToken()

    if payload.get("id") is None:
        raise InvalidToken()

    return payload
