"""
Bearer token validation for the streamable-http transport.

Only used when DOKPLOY_AUTH_ENABLED is true. The middleware passes the raw
Authorization header here and gets back the caller's subject and scopes,
or an AuthError.

Token structure (JWT payload):
    {
        "sub": "ci-agent",                   # Who is calling
        "scope": ["application:manage"],     # Which consolidated tools they may use
        "exp": 1738800000                    # Expiry (Unix timestamp), required
    }

"scope" may also be a single space-delimited string, the OAuth 2.0 form
("application:manage project:manage").

Any failure rejects the request; there is no anonymous fallback.
"""

from dataclasses import dataclass
from typing import Any

import jwt


class AuthError(Exception):
    """
    Raised when token validation fails for any reason.

    Attributes:
        message: Human-readable error description (logged server-side)
        status_code: HTTP status code to return (401 for auth failures)
    """

    def __init__(self, message: str, status_code: int = 401):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class TokenInfo:
    """The caller identified by a validated JWT."""

    subject: str
    scopes: list[str]

    def has_scope(self, scope: str | None) -> bool:
        return scope is not None and scope in self.scopes


def _bearer_token(authorization_header: str | None) -> str:
    if not authorization_header:
        raise AuthError("Missing Authorization header")

    # RFC 6750: the scheme is case-insensitive.
    scheme, _, token = authorization_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Invalid Authorization header format, expected 'Bearer <token>'")
    return token.strip()


def _parse_scopes(claim: Any) -> list[str]:
    if claim is None:
        return []
    if isinstance(claim, str):
        return claim.split()
    if not isinstance(claim, list):
        raise AuthError("Invalid scope claim: must be a list or a space-delimited string")
    if not all(isinstance(entry, str) for entry in claim):
        raise AuthError("Invalid scope claim: all entries must be strings")
    return claim


def validate_token(
    authorization_header: str | None,
    secret_key: str,
    algorithm: str = "HS256",
) -> TokenInfo:
    """
    Validate a Bearer token from the Authorization header.

    Args:
        authorization_header: Raw header value, expected "Bearer <jwt-token>"
        secret_key: Key the token must be signed with
        algorithm: Accepted signing algorithm

    Returns:
        TokenInfo with the validated subject and scopes

    Raises:
        AuthError: If the header, the signature, the expiry or a claim is invalid
    """
    token = _bearer_token(authorization_header)

    try:
        claims = jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid token: {e}")

    return TokenInfo(subject=claims["sub"], scopes=_parse_scopes(claims.get("scope")))
