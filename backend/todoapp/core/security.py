from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional
import logging

from jose import JWTError, jwt
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class EncodingError(Exception):
    """Hashing or token serialization failed for environmental reasons"""


class InvalidTokenError(Exception):
    """Token is malformed, forged, signed with another algorithm or expired"""


class PasswordHasher:
    """
    Salted one-way password digests.

    passlib's bcrypt handler generates a fresh salt per call and embeds it
    in the digest, so hashing the same password twice gives two different
    strings that both verify.
    """

    def __init__(self, schemes: Iterable[str] = ("bcrypt",), **context_kwargs):
        self._context = CryptContext(schemes=list(schemes), deprecated="auto", **context_kwargs)

    def hash(self, plaintext: str) -> str:
        try:
            return self._context.hash(plaintext)
        except (ValueError, TypeError, OSError) as exc:
            raise EncodingError(f"failed to hash password: {exc}") from exc

    def verify(self, plaintext: str, digest: str) -> bool:
        """Constant-time check of plaintext against a stored digest"""
        if not plaintext or not digest:
            return False
        try:
            return self._context.verify(plaintext, digest)
        except (ValueError, TypeError):
            # Unknown or corrupt digest format
            logger.warning("Password verification against malformed digest")
            return False


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime

    @property
    def subject(self) -> str:
        return str(self.user_id)


@dataclass(frozen=True)
class Identity:
    """Verified caller attached to request.state for the life of one request"""
    user_id: int
    email: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Issues and verifies HS256-signed JWTs.

    Payload: sub (user id as string), user_id, email, iat, exp.
    exp is always iat + expiry_hours. The signing algorithm is fixed; tokens
    whose header names any other algorithm are rejected before the
    signature is checked.
    """

    ALLOWED_ALGORITHMS = ("HS256",)

    def __init__(
        self,
        secret: str,
        expiry_hours: int = 24,
        algorithm: str = "HS256",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("token secret must not be empty")
        if algorithm not in self.ALLOWED_ALGORITHMS:
            raise ValueError(f"unsupported signing algorithm: {algorithm}")
        if expiry_hours <= 0:
            raise ValueError("expiry_hours must be positive")
        self._secret = secret
        self._algorithm = algorithm
        self._expiry = timedelta(hours=expiry_hours)
        self._clock = clock or _utcnow

    @property
    def expiry(self) -> timedelta:
        return self._expiry

    def issue(self, user_id: int, email: str) -> str:
        # JWT numeric dates are whole seconds; truncate so exp - iat is exact
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self.expiry
        claims = {
            "sub": str(user_id),
            "user_id": user_id,
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        try:
            return jwt.encode(claims, self._secret, algorithm=self._algorithm)
        except (JWTError, TypeError, ValueError) as exc:
            raise EncodingError(f"failed to sign token: {exc}") from exc

    def verify(self, token: str) -> TokenClaims:
        if not token or token.count(".") != 2:
            raise InvalidTokenError("malformed token")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise InvalidTokenError("malformed token header") from exc
        if header.get("alg") not in self.ALLOWED_ALGORITHMS:
            raise InvalidTokenError(f"unexpected signing method: {header.get('alg')}")

        try:
            # Expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=list(self.ALLOWED_ALGORITHMS),
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidTokenError(f"failed to parse token: {exc}") from exc

        claims = self._claims_from_payload(payload)
        if self._clock() >= claims.expires_at:
            raise InvalidTokenError("token has expired")
        return claims

    def refresh(self, token: str) -> str:
        """Issue a new token for the subject of a still-valid one"""
        claims = self.verify(token)
        return self.issue(claims.user_id, claims.email)

    @staticmethod
    def _claims_from_payload(payload: dict) -> TokenClaims:
        user_id = payload.get("user_id")
        email = payload.get("email")
        iat = payload.get("iat")
        exp = payload.get("exp")
        # bool is an int subclass; reject it explicitly
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError("token has no valid user_id claim")
        if payload.get("sub") != str(user_id):
            raise InvalidTokenError("token subject does not match user_id")
        if not isinstance(email, str) or not email:
            raise InvalidTokenError("token has no email claim")
        if not isinstance(iat, int) or not isinstance(exp, int):
            raise InvalidTokenError("token has no valid iat/exp claims")
        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
