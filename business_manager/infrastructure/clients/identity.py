"""Identity provider HTTP client for email/password authentication"""

import logging
import httpx
from typing import Any, Dict
from business_manager.config import settings
from business_manager.domain.exceptions import AuthenticationError
from business_manager.domain.models import Principal
from business_manager.infrastructure.observability.metrics import identity_failure_counter

# Provider error message prefix -> error code understood by the command layer
PROVIDER_CODES = {
    "EMAIL_NOT_FOUND": "user-not-found",
    "INVALID_PASSWORD": "wrong-password",
    "USER_DISABLED": "user-disabled",
    "INVALID_EMAIL": "invalid-email",
    "EMAIL_EXISTS": "email-already-in-use",
    "WEAK_PASSWORD": "weak-password",
    "OPERATION_NOT_ALLOWED": "operation-not-allowed",
    "PASSWORD_LOGIN_DISABLED": "operation-not-allowed",
}


def error_from_response(response: httpx.Response) -> AuthenticationError:
    """Translate a provider error body such as {"error": {"message": "WEAK_PASSWORD : ..."}}"""
    try:
        raw = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return AuthenticationError("internal-error", f"Identity provider error: {response.status_code}")

    provider_code = raw.split(":", 1)[0].strip()
    code = PROVIDER_CODES.get(provider_code, provider_code.lower().replace("_", "-"))
    return AuthenticationError(code, raw)


class IdentityClient:
    """Client for the identity provider's account REST API"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.identity_api_base
        self.api_key = api_key if api_key is not None else settings.identity_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _post(self, operation: str, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST to an account endpoint.

        Raises:
            AuthenticationError: On timeout, transport errors, or provider rejection
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/v1/accounts:{endpoint}",
                    params={"key": self.api_key},
                    json=payload,
                )
            except httpx.TimeoutException as e:
                identity_failure_counter.labels(operation=operation, code="timeout").inc()
                raise AuthenticationError(
                    "network-request-failed", f"Identity provider timeout after {self.timeout}s"
                ) from e
            except httpx.RequestError as e:
                identity_failure_counter.labels(operation=operation, code="network").inc()
                raise AuthenticationError("network-request-failed", f"Identity provider unreachable: {e}") from e

        if response.is_error:
            error = error_from_response(response)
            identity_failure_counter.labels(operation=operation, code=error.code).inc()
            logging.warning(f"Identity {operation} rejected: {error.code}")
            raise error

        try:
            return response.json()
        except ValueError as e:
            raise AuthenticationError("internal-error", "Invalid response from identity provider") from e

    @staticmethod
    def _principal(data: Dict[str, Any], display_name: str | None = None) -> Principal:
        try:
            return Principal(
                uid=data["localId"],
                email=data["email"],
                display_name=display_name or data.get("displayName") or None,
                id_token=data.get("idToken"),
            )
        except KeyError as e:
            raise AuthenticationError("internal-error", f"Incomplete account data from identity provider: {e}") from e

    async def sign_in(self, email: str, password: str) -> Principal:
        data = await self._post(
            "sign_in",
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._principal(data)

    async def sign_up(self, name: str, email: str, password: str) -> Principal:
        """Create the account, then attach the display name"""
        data = await self._post(
            "sign_up",
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        principal = self._principal(data)
        await self._post(
            "update_profile",
            "update",
            {"idToken": principal.id_token, "displayName": name, "returnSecureToken": False},
        )
        return Principal(uid=principal.uid, email=principal.email, display_name=name, id_token=principal.id_token)

    async def sign_out(self, principal: Principal) -> None:
        """Tokens are bearer-only; signing out just drops them client side"""
        logging.info("Signed out", extra={"principal_id": principal.uid})
