from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from user_backend.domain.errors import EmailServiceError
from user_backend.domain.ports.email_port import EmailPort
from user_backend.infrastructure.http.client import post_envelope

logger = logging.getLogger(__name__)


class HttpEmailServiceAdapter(EmailPort):
    """Client for the email service's template endpoint (``POST /email/v1/send``)."""

    def __init__(
        self,
        base_url: str,
        sender_email: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/email/v1/send",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._sender_email = sender_email
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        *,
        recipient: str,
        template_id: int,
        params: Mapping[str, Any],
    ) -> None:
        url = f"{self._base_url}{self._send_path}"
        payload = {
            "sender_email": self._sender_email,
            "recipient_email": recipient,
            "template_id": template_id,
            "params": dict(params),
        }

        envelope, failure = await post_envelope(self._client, url, payload)
        if envelope is None:
            logger.error("email service unreachable", extra={"reason": failure})
            raise EmailServiceError(debug={"reason": failure})
        if envelope.get("error"):
            logger.error(
                "email service returned non-zero code",
                extra={"error": envelope.get("error"), "template_id": template_id},
            )
            raise EmailServiceError(
                "Received non-zero code from Email Service when sending OTP email",
                debug={"response": envelope},
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
