"""
Session tokens: HS256 JWTs issued and checked through flask-jwt-extended.

Tokens are self-contained and never revoked server-side; expiry is the only
way a token stops working.
"""

import logging
from datetime import timedelta
from typing import Any, Optional

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from ..models import User

logger = logging.getLogger(__name__)


class TokenService:
    """Must be used inside a Flask application context."""

    def issue(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        claims = {
            "userId": user.id,
            "email": user.email,
            "walletAddress": user.wallet_address,
            "authMethod": user.auth_method,
            "role": user.role,
        }
        return create_access_token(
            identity=user.id,
            additional_claims=claims,
            expires_delta=expires_delta,
        )

    def verify(self, token: str) -> Optional[dict[str, Any]]:
        """Return the identity claims of a valid token, or None. Never raises."""
        if not token:
            return None
        try:
            payload = decode_token(token)
        except (PyJWTError, JWTExtendedException) as e:
            logger.info("Token verification failed: %s", e)
            return None

        return {
            "userId": payload.get("sub"),
            "email": payload.get("email"),
            "walletAddress": payload.get("walletAddress"),
            "authMethod": payload.get("authMethod"),
            "role": payload.get("role"),
            "iat": payload.get("iat"),
            "exp": payload.get("exp"),
        }
