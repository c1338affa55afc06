"""
Federated identity verification (Google sign-in).

Google ID tokens are RS256 JWTs signed with keys published as a JWK set.
The key set is fetched on each verification and the token is checked for
signature, expiry, audience and issuer with python-jose.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp
from jose import JWTError, jwt

from vibelytics.config import settings
from vibelytics.core.exceptions import ConfigurationError, InvalidCredentials, UpstreamUnavailable
from vibelytics.utils.logging_config import get_logger

logger = get_logger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


@dataclass(frozen=True)
class FederatedIdentity:
    """Verified claims of a federated sign-in."""

    subject: str
    email: str
    name: str


class GoogleIdentityVerifier:
    """
    Verifies Google ID tokens against Google's public key set.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        certs_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.certs_url = certs_url or settings.GOOGLE_CERTS_URL
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.HTTP_TIMEOUT_SECONDS)

    async def fetch_keys(self) -> Dict[str, Any]:
        """
        Download the JWK set used to sign Google ID tokens.

        Raises:
            UpstreamUnavailable: If the key set cannot be fetched
        """
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(self.certs_url) as resp:
                    if resp.status != 200:
                        raise UpstreamUnavailable(
                            "Could not fetch identity provider keys",
                            detail={"status": resp.status},
                        )
                    keys = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning(f"Fetching Google certs failed: {exc}")
            raise UpstreamUnavailable(
                "Could not fetch identity provider keys", detail=str(exc)
            ) from exc

        if not isinstance(keys, dict) or not isinstance(keys.get("keys"), list):
            raise UpstreamUnavailable(
                "Invalid key set from identity provider", detail="missing 'keys'"
            )
        return keys

    async def verify(self, token: str) -> FederatedIdentity:
        """
        Verify a Google ID token.

        Args:
            token: Raw ID token from the client

        Returns:
            FederatedIdentity with the Google subject, email and name

        Raises:
            ConfigurationError: If GOOGLE_CLIENT_ID is not set
            InvalidCredentials: If the token fails any check
            UpstreamUnavailable: If Google's keys cannot be fetched
        """
        if not self.client_id:
            raise ConfigurationError(detail="GOOGLE_CLIENT_ID is not configured")

        keys = await self.fetch_keys()
        try:
            claims = jwt.decode(
                token,
                keys,
                algorithms=["RS256"],
                audience=self.client_id,
                options={"verify_at_hash": False},
            )
        except JWTError as exc:
            logger.info(f"Rejected federated token: {exc}")
            raise InvalidCredentials("Invalid federated token") from exc

        return self.identity_from_claims(claims)

    @staticmethod
    def identity_from_claims(claims: Dict[str, Any]) -> FederatedIdentity:
        """
        Build a FederatedIdentity from decoded token claims.

        Raises:
            InvalidCredentials: On a foreign issuer or a missing/unverified email
        """
        if claims.get("iss") not in GOOGLE_ISSUERS:
            raise InvalidCredentials("Invalid federated token")

        subject = claims.get("sub")
        email = claims.get("email")
        if not subject or not email or claims.get("email_verified") in (False, "false"):
            raise InvalidCredentials("Invalid federated token")

        name = claims.get("name") or email.split("@")[0]
        return FederatedIdentity(subject=str(subject), email=email.strip().lower(), name=name)


def get_identity_verifier() -> GoogleIdentityVerifier:
    """Dependency returning the verifier used by ``POST /signin``."""
    return GoogleIdentityVerifier()
