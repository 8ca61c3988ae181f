"""
Site Token Service - Rotating signed tokens shown on site displays
"""
import jwt
import time
from typing import Dict, Any, Optional

from app.core.config import settings
from atams.exceptions import BadRequestException

TOKEN_ISSUER = "smartclock-attendance"


class SiteTokenService:
    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        rotation_seconds: Optional[int] = None,
        grace_seconds: Optional[int] = None
    ) -> None:
        self.secret = secret or settings.SITE_TOKEN_SECRET
        self.algorithm = algorithm or settings.SITE_TOKEN_ALG
        self.rotation_seconds = rotation_seconds or settings.SITE_TOKEN_ROTATION_SECONDS
        self.grace_seconds = grace_seconds if grace_seconds is not None else settings.SITE_TOKEN_GRACE_SECONDS

    def issue(self, site_id: str, org_id: int, now: Optional[float] = None) -> Dict[str, Any]:
        """
        Issue a site token for the current rotation slot

        Returns:
            dict: {token: str, slot: int, expires_in: int}
        """
        now = int(now if now is not None else time.time())
        slot = now // self.rotation_seconds
        expires_in = self.rotation_seconds + self.grace_seconds

        payload = {
            "iss": TOKEN_ISSUER,
            "aud": f"site:{site_id}",
            "ws_id": site_id,
            "org_id": org_id,
            "slot": slot,
            "iat": now,
            "exp": now + expires_in,
        }

        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)

        return {
            "token": token,
            "slot": slot,
            "expires_in": expires_in
        }

    def verify(self, token: str, org_id: Optional[int] = None, now: Optional[float] = None) -> Dict[str, Any]:
        """
        Verify a site token and return its payload

        Args:
            token: Token string read from the display
            org_id: Reject tokens of another organization when given
            now: Evaluation time (unix seconds), defaults to the wall clock

        Raises:
            BadRequestException: If the token is invalid or expired
        """
        options = {"verify_aud": False}  # audience checked against ws_id below
        if now is not None:
            # Expiry is checked manually against the supplied instant
            options["verify_exp"] = False
            options["verify_iat"] = False

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=TOKEN_ISSUER,
                options=options
            )
        except jwt.ExpiredSignatureError:
            raise BadRequestException("Site token expired")
        except jwt.InvalidTokenError as e:
            raise BadRequestException(f"Invalid site token: {str(e)}")

        for field in ("aud", "ws_id", "org_id", "slot", "exp"):
            if field not in payload:
                raise BadRequestException(f"Missing required field: {field}")

        if now is not None and int(now) >= payload["exp"]:
            raise BadRequestException("Site token expired")

        if payload["aud"] != f"site:{payload['ws_id']}":
            raise BadRequestException("Site ID mismatch in token")

        if org_id is not None and payload["org_id"] != org_id:
            raise BadRequestException("Site token belongs to another organization")

        return payload

    def site_id_from(self, token: str, org_id: Optional[int] = None) -> str:
        """Verified site ID carried by a token"""
        return self.verify(token, org_id=org_id)["ws_id"]
