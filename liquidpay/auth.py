from typing import Optional

from jose import jwt
from jose.exceptions import JOSEError

from liquidpay import config
from liquidpay.models import User


class AuthError(Exception):
    pass


def verify_token(token: str) -> dict:
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JOSEError as exc:
        raise AuthError("Invalid or missing token") from exc


class AuthSession:
    """Holds the signed-in user for the lifetime of the app."""

    def __init__(self):
        self._token: Optional[str] = None
        self._user: Optional[User] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    def sign_in(self, token: str) -> User:
        claims = verify_token(token)
        uid = claims.get("sub") or claims.get("uid")
        if not uid:
            raise AuthError("Token has no subject")

        self._token = token
        self._user = User(
            uid=uid,
            phone_number=claims.get("phone_number"),
            email=claims.get("email"),
        )
        return self._user

    def sign_out(self) -> None:
        self._token = None
        self._user = None
