from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from jose import JWTError, jwt

from lostfound.config import get_settings
from lostfound.utils.errors import TokenExpired, TokenInvalid, TokenMalformed


class SessionIssuer:
    """Issues and verifies stateless bearer tokens.

    A token binds a user id (``sub``) and an expiry (``exp``), nothing else.
    Role is deliberately left out: callers must re-fetch the user on every
    request. Verification depends only on the token, the clock and the key,
    so there is no server-side session to revoke.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 24 * 60):
        if not secret_key:
            raise ValueError("Signing key must not be empty")

        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = timedelta(minutes=expire_minutes)

    def issue(self, user_id, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        expiry = now + self.expires_in

        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int(expiry.timestamp()),
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)

        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            raise TokenMalformed("Token could not be parsed")

        if not isinstance(claims.get("sub"), str) or not isinstance(claims.get("exp"), (int, float)):
            raise TokenMalformed("Token is missing required claims")

        try:
            # expiry is checked below against the supplied clock
            jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            raise TokenInvalid("Invalid token")

        if now.timestamp() >= claims["exp"]:
            raise TokenExpired("Token expired")

        return claims["sub"]


@lru_cache
def get_session_issuer() -> SessionIssuer:
    settings = get_settings()
    return SessionIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )
