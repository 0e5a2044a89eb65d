"""Identity resolver backed by signed JWTs.

The control plane only needs the subject id; every other claim is opaque.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt
from pydantic import SecretStr

from app.domain.exceptions import AuthenticationException


class JwtIdentityResolver:
    """verify(token) -> subject id, or AuthenticationException."""

    def __init__(self, secret_key: SecretStr | str, algorithm: str = "HS256") -> None:
        self._secret = (
            secret_key.get_secret_value() if isinstance(secret_key, SecretStr) else secret_key
        )
        self.algorithm = algorithm

    def verify(self, token: str) -> str:
        """Decode token and return its ``sub`` claim.

        Raises:
            AuthenticationException: If the token is empty, invalid, expired or
                has no subject.
        """
        if not token:
            raise AuthenticationException("Missing identity token")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise AuthenticationException(f"Invalid token: {e!s}") from e
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthenticationException("Token has no subject")
        return subject

    def issue(self, subject_id: str, expires_delta: timedelta | None = None) -> str:
        """Sign a token for subject_id (operator scripts and tests)."""
        claims: dict[str, Any] = {
            "sub": subject_id,
            "exp": datetime.now(UTC) + (expires_delta or timedelta(hours=1)),
        }
        return cast(str, jwt.encode(claims, self._secret, algorithm=self.algorithm))
