"""Redis-cached bearer token manager for Hotel CMS API authentication."""

from typing import Optional

import httpx
import redis.asyncio as redis
from structlog import get_logger

from src.config import settings
from src.models.cms import LoginResult

logger = get_logger(__name__)


class TokenManagerError(Exception):
    """Raised when an API token cannot be obtained."""

    pass


class AuthTokenManager:
    """Obtains the CMS JWT via /auth/login and shares it across processes through Redis.

    A statically configured token (API_TOKEN) short-circuits both Redis and login.
    """

    REDIS_KEY_PREFIX = "hotel-cms:auth:token:"

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the token manager.

        Args:
            redis_client: Redis client to use; built from settings when omitted
            transport: Optional httpx transport for the login request
        """
        self.static_token = settings.api.token.strip()
        self.email = settings.api.email.strip()
        self.password = settings.api.password
        self.base_url = settings.api.base_url.rstrip("/")
        self.timeout = settings.api.request_timeout
        self.token_ttl = settings.redis.token_ttl
        self.transport = transport
        self._redis_client = redis_client

    @property
    def redis_client(self) -> redis.Redis:
        if self._redis_client is None:
            self._redis_client = redis.Redis(
                host=settings.redis.host,
                port=settings.redis.port,
                db=settings.redis.db,
                password=settings.redis.password,
                ssl=settings.redis.ssl,
                decode_responses=True,
                socket_timeout=settings.redis.socket_timeout,
                socket_connect_timeout=settings.redis.socket_connect_timeout,
            )
        return self._redis_client

    @property
    def redis_key(self) -> str:
        return f"{self.REDIS_KEY_PREFIX}{self.email}"

    async def get_auth_token(self) -> str:
        """Get a bearer token from config, Redis, or a fresh login.

        Returns:
            Valid JWT for the CMS API

        Raises:
            TokenManagerError: If no token is configured and login fails
        """
        if self.static_token:
            return self.static_token

        if not self.email or not self.password:
            raise TokenManagerError(
                "No API token configured and API_EMAIL/API_PASSWORD are not set"
            )

        cached_token = await self._get_cached_token()
        if cached_token:
            logger.debug("Using cached API token from Redis")
            return cached_token

        logger.info("Logging in to Hotel CMS API", email=self.email)
        try:
            login_result = await self._login()
        except Exception as e:
            logger.error("Failed to log in to Hotel CMS API", error=str(e), exc_info=True)
            raise TokenManagerError(f"Failed to obtain API token: {str(e)}") from e

        token = login_result.token
        if not token:
            raise TokenManagerError("Login response did not contain a token")

        await self._store_token(token, self.token_ttl)
        return token

    async def invalidate(self) -> None:
        """Drop the cached token, e.g. after the API answered 401."""
        if self.static_token:
            return
        try:
            await self.redis_client.delete(self.redis_key)
        except Exception as e:
            logger.warning("Failed to delete cached token from Redis", error=str(e))

    async def _get_cached_token(self) -> Optional[str]:
        try:
            token = await self.redis_client.get(self.redis_key)
            return token if token else None
        except Exception as e:
            logger.warning("Redis get operation failed", error=str(e))
            return None

    async def _store_token(self, token: str, ttl: int) -> None:
        try:
            await self.redis_client.setex(self.redis_key, ttl, token)
            logger.info("Stored API token in Redis", ttl_seconds=ttl)
        except Exception as e:
            # Token is still usable for this process
            logger.warning("Failed to store token in Redis (will still use token)", error=str(e))

    async def _login(self) -> LoginResult:
        """POST credentials to /auth/login.

        Returns:
            Login response with `token` and `user`

        Raises:
            httpx.HTTPStatusError: If the credentials are rejected
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                f"{self.base_url}/auth/login",
                json={"email": self.email, "password": self.password},
                headers={"Content-Type": "application/json"},
            )

            if response.status_code != 200:
                logger.error(
                    "Login request failed",
                    status_code=response.status_code,
                    response_text=response.text[:200],
                )
                response.raise_for_status()

            return LoginResult(**response.json())

    async def close(self) -> None:
        """Close the Redis connection if one was opened."""
        if self._redis_client is None:
            return
        try:
            await self._redis_client.aclose()
            logger.debug("Closed Redis connection")
        except Exception as e:
            logger.warning("Error closing Redis connection", error=str(e))
