from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = []
    timezone: str = "Asia/Jakarta"  # Office-local timezone; "today" starts at local midnight
    minutes_per_ticket: int = 15  # Used for the advisory wait estimate
    pending_limit: int = 10  # Number of waiting tickets shown on the public board
    sequence_max_attempts: int = 5  # Counter increments tried before the randomized fallback
    staff_session_ttl_hours: int = 12
    admin_password: str = "admin"  # Password for the default `admin` staff account
    llm_model: str = "gemini/gemini-2.5-flash"
    llm_api_key: str = ""
    telegram_bot_token: str | None = None  # Forward announcements to a Telegram chat (optional)
    telegram_chat_id: str | None = None

    model_config = {
        "env_file": [".env"],
        "env_prefix": "POSBAKUM_",
        "extra": "ignore",
    }
