"""
会话 Redis 存储层

每个浏览器会话独立存储，Key = todo:session:{session_id}，TTL = SESSION_TTL，
每次保存续期；过期即等同于会话销毁，不做额外清理。

每个请求按 load → 修改 → save 的顺序使用，不加锁：
同一会话的并发请求以最后一次保存为准。

容错策略：
- load() 失败时：记录错误日志并抛出 SessionStoreError（不能用空数据覆盖真实会话）
- save() 失败时：记录错误日志并静默忽略（本次修改丢失，但请求照常返回）
"""

import redis.asyncio as aioredis
import structlog
from pydantic import ValidationError
from redis.exceptions import RedisError

from session_todo.cache.redis_client import RedisKeys
from session_todo.config import get_settings
from session_todo.todo.errors import SessionStoreError
from session_todo.todo.schemas import SessionData

log = structlog.get_logger()
settings = get_settings()


class SessionStore:
    """会话级 SessionData 的 Redis 读写"""

    def __init__(self, redis: aioredis.Redis, ttl: int | None = None):
        self.redis = redis
        self.ttl = ttl or settings.SESSION_TTL

    async def load(self, session_id: str) -> SessionData:
        """读取会话数据，不存在时返回空会话"""
        try:
            raw = await self.redis.get(RedisKeys.session(session_id))
        except RedisError as e:
            log.error("SessionStore.load 失败", session_id=session_id, error=str(e))
            raise SessionStoreError("Session storage is unavailable.", cause=e) from e

        if not raw:
            return SessionData()
        try:
            return SessionData.model_validate_json(raw)
        except ValidationError as e:
            # 数据结构不兼容（如旧版本写入），丢弃后按新会话处理
            log.warning("会话数据无法解析，重置为空会话", session_id=session_id, error=str(e))
            return SessionData()

    async def save(self, session_id: str, data: SessionData) -> None:
        """覆盖写入会话数据并续期"""
        try:
            await self.redis.set(
                RedisKeys.session(session_id),
                data.model_dump_json(),
                ex=self.ttl,
            )
        except RedisError as e:
            log.error("SessionStore.save 失败，会话状态未持久化", session_id=session_id, error=str(e))
