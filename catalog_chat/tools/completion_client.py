"""
Chat-completion client for the external text-generation service.

Sends one grounding prompt plus the user's utterance per turn and
returns the first choice verbatim. Every failure surfaces as a
``ServiceError`` carrying a machine-readable code; the session decides
what to do with it. There are no retries here.

Usage:
    generator = ExternalGenerator("sk-...")
    try:
        text = generator.generate("Do you have Dune?", Role.PATRON, entries)
    except ServiceError as e:
        ...
"""

from enum import Enum
from typing import Optional

import httpx

from catalog_chat.config import ModelConfig, settings
from catalog_chat.logging_context import get_session_logger
from catalog_chat.prompts.system_prompts import build_grounding_prompt
from catalog_chat.schemas.catalog_schema import CatalogEntry, Role

logger = get_session_logger(__name__)


class ServiceErrorCode(str, Enum):
    RATE_LIMITED = "rate_limited"
    INVALID_CREDENTIAL = "invalid_credential"
    FORBIDDEN = "forbidden"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"


_STATUS_CODES = {
    429: ServiceErrorCode.RATE_LIMITED,
    401: ServiceErrorCode.INVALID_CREDENTIAL,
    403: ServiceErrorCode.FORBIDDEN,
}


class ServiceError(Exception):
    """The external service could not produce a reply for this turn."""

    def __init__(self, code: ServiceErrorCode, message: str) -> None:
        super().__init__(f"{code.value}: {message}")
        self.code = code
        self.message = message

    @property
    def recoverable(self) -> bool:
        """True when retrying later with the same credential could succeed."""
        return self.code not in (ServiceErrorCode.INVALID_CREDENTIAL, ServiceErrorCode.FORBIDDEN)


class ExternalGenerator:
    """Grounded reply generation through an OpenAI-compatible endpoint."""

    def __init__(
        self,
        credential: str,
        model: Optional[str] = None,
        config: ModelConfig = settings.model,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not credential or not credential.strip():
            raise ValueError("credential must be a non-empty string")
        self.credential = credential.strip()
        self.model = model or config.llm_model
        self.config = config
        self._client = client or httpx.Client(timeout=config.request_timeout_sec)

    def build_payload(self, utterance: str, role: Role, catalog: list[CatalogEntry],
                      display_name: str = "") -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": build_grounding_prompt(role, catalog, display_name)},
                {"role": "user", "content": utterance},
            ],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.llm_temperature,
        }

    def generate(
        self,
        utterance: str,
        role: Role,
        catalog: list[CatalogEntry],
        display_name: str = "",
    ) -> str:
        """
        Ask the external model for a reply grounded in ``catalog``.

        Raises:
            ServiceError: On any transport, status, or body problem.
        """
        payload = self.build_payload(utterance, role, catalog, display_name)
        try:
            response = self._client.post(
                self.config.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.credential}"},
                timeout=self.config.request_timeout_sec,
            )
        except httpx.TimeoutException as e:
            raise ServiceError(ServiceErrorCode.TIMEOUT, str(e) or "request timed out") from e
        except httpx.HTTPError as e:
            raise ServiceError(ServiceErrorCode.NETWORK, str(e) or type(e).__name__) from e

        if not response.is_success:
            code = _STATUS_CODES.get(response.status_code, ServiceErrorCode.HTTP_ERROR)
            raise ServiceError(code, f"HTTP {response.status_code}: {response.text[:200]}")

        content = self._parse_content(response)
        logger.debug("External reply received (%d chars, model=%s)", len(content), self.model)
        return content

    @staticmethod
    def _parse_content(response: httpx.Response) -> str:
        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ServiceError(
                ServiceErrorCode.MALFORMED_RESPONSE, f"unexpected response body: {e!r}"
            ) from e
        if not isinstance(content, str) or not content.strip():
            raise ServiceError(ServiceErrorCode.MALFORMED_RESPONSE, "empty completion content")
        return content

    def close(self) -> None:
        self._client.close()
