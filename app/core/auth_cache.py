"""Authentication cache for federated identity-provider public keys.

Fetches and caches the provider's signing keys from FEDERATED_JWKS_URL.
Handles automatic key rotation without manual configuration updates.
"""

from typing import Dict, Optional
from datetime import datetime, timedelta, timezone
import httpx
from jose import jwk

from app.core.config import settings


class AuthCache:
    """
    Cache for JWT public keys (JWKS - JSON Web Key Set).

    Key rotation handling:
    - Providers publish multiple keys during rotation (old + new)
    - We cache all available keys by their kid (key ID)
    - An unknown kid triggers one refresh before giving up

    Cache TTL: 1 hour (configurable)
    """

    def __init__(self, ttl_hours: int = 1):
        """
        Initialize authentication cache.

        Args:
            ttl_hours: Cache time-to-live in hours (default: 1)
        """
        self.keys: Dict[str, str] = {}  # kid -> PEM public key
        self.last_refresh: Optional[datetime] = None
        self.ttl = timedelta(hours=ttl_hours)
        self._client: Optional[httpx.AsyncClient] = None

    def _needs_refresh(self) -> bool:
        """Check if cache needs refresh (expired or empty)."""
        if not self.last_refresh or not self.keys:
            return True
        return datetime.now(timezone.utc) - self.last_refresh > self.ttl

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client (reuse connections)."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=10.0)
        return self._client

    async def _refresh_keys(self) -> None:
        """
        Fetch JWKS and update cache.

        Response format:
        {
          "keys": [
            {"kid": "abc", "kty": "RSA", "alg": "RS256", "n": "...", "e": "AQAB", "use": "sig"}
          ]
        }

        Raises:
            httpx.HTTPError: If JWKS endpoint unreachable
            ValueError: If JWKS URL missing or format invalid
        """
        if not settings.FEDERATED_JWKS_URL:
            raise ValueError("FEDERATED_JWKS_URL not configured")

        client = await self._get_client()
        response = await client.get(settings.FEDERATED_JWKS_URL)
        response.raise_for_status()
        jwks_data = response.json()

        keys_data = jwks_data.get("keys", [])
        if not keys_data:
            raise ValueError("JWKS response contains no keys")

        new_keys = {}
        for key_data in keys_data:
            kid = key_data.get("kid")
            if not kid:
                continue  # Skip keys without kid

            # python-jose converts the JWK to PEM for verification
            key_obj = jwk.construct(key_data, algorithm=key_data.get("alg", "RS256"))
            new_keys[kid] = key_obj.to_pem().decode("utf-8")

        # Atomic update
        self.keys = new_keys
        self.last_refresh = datetime.now(timezone.utc)

    async def get_key(self, kid: str, retry: bool = True) -> Optional[str]:
        """
        Get public key by kid (key ID).

        If key not in cache or cache expired, refreshes from JWKS endpoint.

        Args:
            kid: Key ID from JWT header
            retry: If True, refresh and retry once on cache miss (default: True)

        Returns:
            Public key in PEM format, or None if kid not found
        """
        if self._needs_refresh():
            await self._refresh_keys()

        if kid in self.keys:
            return self.keys[kid]

        # Cache miss - refresh and retry once
        if retry:
            await self._refresh_keys()
            return self.keys.get(kid)

        return None

    def clear(self) -> None:
        self.keys = {}
        self.last_refresh = None

    async def close(self) -> None:
        """Close HTTP client (cleanup)."""
        if self._client:
            await self._client.aclose()
            self._client = None


# Global authentication cache instance (singleton pattern)
auth_cache = AuthCache()
