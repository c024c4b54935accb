from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis

import user_backend.domain.services as domain_services
from user_backend.domain.ports.otp_store import OtpStorePort

# None and "" must stay distinguishable once stored as a hash field.
_NO_IDENTITY = "-"


_LUA_VERIFY = """
-- KEYS[1]: otp key
-- ARGV[1]: expected digest (base64)
-- ARGV[2]: expected bound identity (encoded)
-- ARGV[3]: "1" to delete the entry on success
local key = KEYS[1]
local cur = redis.call('HMGET', key, 'digest', 'bound')
if not cur[1] then
  return 0
end
if cur[1] ~= ARGV[1] or cur[2] ~= ARGV[2] then
  return 0
end
if ARGV[3] == '1' then
  redis.call('DEL', key)
end
return 1
"""


def _encode_identity(bound_identity: Optional[str]) -> str:
    return _NO_IDENTITY if bound_identity is None else "u:" + bound_identity


class RedisOtpStore(OtpStorePort):
    """
    OTP table shared by every instance pointing at the same Redis.

    Only a salted digest of the code is stored. Expiry is Redis' own key TTL;
    capacity is left to the server's maxmemory policy.
    """

    def __init__(
        self,
        redis: Redis,
        *,
        ttl_seconds: int = 600,
        consume_on_verify: bool = False,
        key_prefix: str = "otp:",
    ) -> None:
        self._redis = redis
        self._ttl = ttl_seconds
        self._consume = consume_on_verify
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def create(self, key: str, bound_identity: Optional[str] = None) -> str:
        code = domain_services.generate_6digit_code()
        salt_b64, digest_b64 = domain_services.make_code_digest(code)
        redis_key = self._key(key)
        pipe = self._redis.pipeline(transaction=True)
        pipe.delete(redis_key)
        pipe.hset(
            redis_key,
            mapping={
                "salt": salt_b64,
                "digest": digest_b64,
                "bound": _encode_identity(bound_identity),
            },
        )
        pipe.expire(redis_key, self._ttl)
        await pipe.execute()
        return code

    async def verify(self, key: str, bound_identity: Optional[str], code: str) -> bool:
        redis_key = self._key(key)
        salt_b64 = await self._redis.hget(redis_key, "salt")
        if not salt_b64:
            return False
        expected = domain_services.code_digest_b64(code, salt_b64)
        if expected is None:
            return False
        # atomic compare (and optional delete)
        res = await self._redis.eval(
            _LUA_VERIFY,
            1,
            redis_key,
            expected,
            _encode_identity(bound_identity),
            "1" if self._consume else "0",
        )
        return int(res) == 1
