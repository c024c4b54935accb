from typing import Optional, Protocol


class OtpStorePort(Protocol):
    async def create(self, key: str, bound_identity: Optional[str] = None) -> str:
        """Issue a fresh 6-digit code for ``key``, replacing any previous one."""

    async def verify(self, key: str, bound_identity: Optional[str], code: str) -> bool:
        """
        True iff a live entry exists for ``key`` and both ``code`` and
        ``bound_identity`` match. ``None`` is matched like any other value.
        """
