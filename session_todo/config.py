"""
全局配置模块：通过 pydantic-settings 读取 .env 环境变量
"""

from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用全局配置，从 .env 文件加载"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Redis ──
    REDIS_URL: str = "redis://127.0.0.1:6379/0"
    REDIS_MAX_CONNECTIONS: int = 10

    # ── 会话 ──
    SESSION_COOKIE_NAME: str = "todo_session"
    SESSION_TTL: int = 86400 * 7  # 会话 TTL（秒），默认 7 天，每次保存时续期
    SESSION_COOKIE_SECURE: bool = False  # 生产环境必须为 true（仅 HTTPS 下发 Cookie）

    # ── 应用 ──
    ENV: str = "development"  # development | production
    APP_NAME: str = "session-todo"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def _check_production_cookie(self) -> "Settings":
        """生产环境强制要求 Secure Cookie"""
        if self.ENV == "production" and not self.SESSION_COOKIE_SECURE:
            raise ValueError(
                "生产环境 SESSION_COOKIE_SECURE 必须为 true，"
                "请在 .env 中开启，避免会话 Cookie 经明文 HTTP 泄露。"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """单例获取配置（带缓存）"""
    return Settings()
