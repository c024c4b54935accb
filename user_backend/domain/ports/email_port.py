from __future__ import annotations

from typing import Any, Mapping, Protocol


class EmailPort(Protocol):
    async def send(
        self,
        *,
        recipient: str,
        template_id: int,
        params: Mapping[str, Any],
    ) -> None:
        """Render ``template_id`` with ``params`` and deliver it. Raises EmailServiceError."""
