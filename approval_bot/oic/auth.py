"""OAuth2 client-credentials exchange against the identity domain (IDCS)."""

import asyncio
import json

import aiohttp
from loguru import logger

from approval_bot.config import DEFAULT_IDCS_SCOPE


class AuthError(Exception):
    """Raised when a bearer token cannot be obtained."""

    pass


class CredentialProvider:
    """Obtains bearer tokens for the workflow engine.

    Every call performs a fresh exchange; nothing is cached, so a token is
    never reused after it might have expired.

    Parameters
    ----------
    session : aiohttp.ClientSession
        Shared HTTP session.
    token_url : str
        Token endpoint of the identity domain.
    client_id : str
        OAuth2 client id, sent as the basic-auth user name.
    client_secret : str
        OAuth2 client secret, sent as the basic-auth password.
    scope : str
        Requested scope.
    timeout : float
        Total request timeout in seconds.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token_url: str,
        client_id: str,
        client_secret: str,
        scope: str = DEFAULT_IDCS_SCOPE,
        timeout: float = 15.0,
    ):
        self._session = session
        self.token_url = token_url
        self.scope = scope or DEFAULT_IDCS_SCOPE
        self.timeout = timeout
        self._authorization = aiohttp.BasicAuth(client_id, client_secret).encode()

    async def acquire_credential(self) -> str:
        """Exchange the client credentials for an access token.

        Returns
        -------
        str
            The access token.

        Raises
        ------
        AuthError
            If the endpoint is unreachable, answers with a non-2xx status or
            does not return an access token.
        """
        form = {"grant_type": "client_credentials", "scope": self.scope}
        logger.debug(f"Requesting access token from {self.token_url}")

        try:
            async with self._session.post(
                self.token_url,
                data=form,
                headers={
                    "Authorization": self._authorization,
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                status = response.status
                body = (await response.read()).decode("utf-8", errors="replace")
        except asyncio.TimeoutError as e:
            raise AuthError(f"Token request timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise AuthError(f"Token request failed: {e}") from e

        if not 200 <= status < 300:
            raise AuthError(f"Token endpoint returned HTTP {status}")

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise AuthError("Token endpoint returned a non-JSON body") from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise AuthError("Token endpoint response has no access_token")
        return token
