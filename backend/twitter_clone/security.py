"""
Twitter Clone Backend - Password Hashing and Token Service
===========================================================

What:  Wrappers around the two cryptographic collaborators of the service:
       bcrypt for passwords and PyJWT for signed session tokens.
How:   `PasswordHasher` hashes/verifies passwords; `TokenService` issues and
       decodes HS256 tokens carrying a `userId` claim.
Who:   UserService (register/login) and the auth gate.

Token format:
    {"userId": <int>}                      default, no expiry
    {"userId": <int>, "exp": <unix ts>}    when JWT_EXPIRE_MINUTES is set

    The claim name `userId` matches tokens issued by v1 deployments, so
    tokens signed with the same secret keep working.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from twitter_clone.config import settings
from twitter_clone.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of input and recent releases refuse
# anything longer outright.
BCRYPT_MAX_PASSWORD_BYTES = 72

USER_ID_CLAIM = "userId"


class PasswordHasher:
    """
    One-way salted password hashing.

    Both methods are CPU-bound (tens of milliseconds at the default cost);
    async callers run them in the thread pool.
    """

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or settings.bcrypt_rounds

    def hash(self, password: str) -> str:
        """
        Returns the bcrypt hash of `password` as ASCII text (`$2b$...`).

        Raises:
            ValueError: password longer than BCRYPT_MAX_PASSWORD_BYTES.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError("password exceeds bcrypt input limit")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        """Constant-time comparison of `password` against a stored hash."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii"))
        except ValueError:
            # Over-long input or a stored value that is not a bcrypt hash
            return False


class TokenService:
    """
    Issues and verifies signed session tokens.

    decode() turns every failure into the same AuthenticationError; the
    reason only travels in the exception context, for the log.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_minutes = (
            expire_minutes if expire_minutes is not None else settings.jwt_expire_minutes
        )

    def issue(self, user_id: int) -> str:
        payload: Dict[str, Any] = {USER_ID_CLAIM: user_id}
        if self.expire_minutes:
            payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> int:
        """
        Verifies `token` and returns the user id it carries.

        Raises:
            AuthenticationError: for any invalid, expired or incomplete token.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            raise AuthenticationError(context={"reason": type(e).__name__})

        user_id = payload.get(USER_ID_CLAIM)
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise AuthenticationError(context={"reason": "missing_user_id"})
        return user_id


password_hasher = PasswordHasher()
token_service = TokenService()
