"""
JWT token handler.
Validates bearer tokens and extracts the owner id from the ``sub`` claim.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt as jose_jwt

from invoicing.config import Settings, get_settings
from invoicing.domain.models.base import ValidationError


class JWTHandler:
    """Handles JWT token validation and user extraction."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.jwt_secret = self.settings.jwt_secret_key
        self.jwt_algorithm = self.settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string, with or without the 'Bearer ' prefix

        Returns:
            Dict containing token payload

        Raises:
            ValidationError: If token is invalid, expired or has no subject
        """
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jose_jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_aud": False},
            )
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}", code="INVALID_TOKEN")

        if not payload.get('sub'):
            raise ValidationError("Token missing user ID (sub claim)", code="INVALID_TOKEN")

        return payload

    def get_user_id(self, token: str) -> str:
        """Extract the user ID from a JWT token."""
        return self.verify_token(token)['sub']

    def is_token_valid(self, token: str) -> bool:
        try:
            self.verify_token(token)
            return True
        except ValidationError:
            return False

    def create_token(self, user_id: str, expires_minutes: int = 60, **claims: Any) -> str:
        """
        Issue a signed token for a user. Used by tooling and tests; production
        tokens come from the identity provider.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
            **claims,
        }
        return jose_jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
