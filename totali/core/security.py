"""Security infrastructure for the Totali application.

Credentials live with the external identity provider (Supabase); this module
only verifies the bearer tokens it issues:
- HS256 JWT verification against the provider's secret and audience
- Mapping of token claims onto the authenticated principal
- Token minting for local tooling and tests
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi.security import HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from totali.core.config import SupabaseSettings, get_settings
from totali.core.exceptions import UnauthorizedError
from totali.core.logging import get_logger
from totali.models.domain.user import AuthUser

logger = get_logger(__name__)

# Bearer scheme for token extraction; missing headers are reported by us
bearer_scheme = HTTPBearer(auto_error=False)


class SecurityService:
    """Verify identity-provider tokens and build the authenticated principal."""

    def __init__(self, settings: Optional[SupabaseSettings] = None):
        self.settings = settings or get_settings().SUPABASE

    def decode_token(self, token: str) -> Dict[str, Any]:
        """Decode and validate a JWT, raising 401 on any failure."""
        if not self.settings.SUPABASE_JWT_SECRET:
            logger.error("SUPABASE_JWT_SECRET is not configured")
            raise UnauthorizedError("Invalid or expired token")

        try:
            return jwt.decode(
                token,
                self.settings.SUPABASE_JWT_SECRET,
                algorithms=[self.settings.JWT_ALGORITHM],
                audience=self.settings.SUPABASE_JWT_AUDIENCE,
            )
        except JWTError as e:
            logger.warning("Token verification failed", reason=str(e))
            raise UnauthorizedError("Invalid or expired token")

    def verify_token(self, token: Optional[str]) -> AuthUser:
        """Validate token and return the principal it names."""
        if not token:
            raise UnauthorizedError("Authorization token required")

        payload = self.decode_token(token)
        user_id = payload.get("sub")
        if not user_id:
            raise UnauthorizedError("Invalid or expired token")

        metadata = payload.get("user_metadata") or {}
        try:
            return AuthUser(
                id=user_id,
                email=payload.get("email"),
                name=metadata.get("name") or metadata.get("full_name"),
                avatar_url=metadata.get("avatar_url"),
            )
        except ValidationError:
            raise UnauthorizedError("Invalid or expired token")

    def create_access_token(
        self,
        subject: str,
        email: Optional[str] = None,
        user_metadata: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create a token shaped like the identity provider's."""
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
        to_encode = {
            "sub": subject,
            "aud": self.settings.SUPABASE_JWT_AUDIENCE,
            "role": "authenticated",
            "exp": expire,
            "user_metadata": user_metadata or {},
        }
        if email:
            to_encode["email"] = email

        return jwt.encode(
            to_encode,
            self.settings.SUPABASE_JWT_SECRET,
            algorithm=self.settings.JWT_ALGORITHM
        )


def create_access_token(
    subject: str,
    settings: Optional[SupabaseSettings] = None,
    **kwargs
) -> str:
    """Mint a token with the configured (or given) secret."""
    return SecurityService(settings).create_access_token(subject, **kwargs)
