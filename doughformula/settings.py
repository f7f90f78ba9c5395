from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    redis_url: str = "redis://localhost:6379/0"
    # Upper bound (seconds) a sync store call may hold the event loop
    redis_socket_timeout: float = 0.5

    # Key-value store namespace (timer snapshot, unit preference)
    storage_prefix: str = "doughformula:"

    # Share links
    share_base_url: str = "https://thepizzadoughformula.com"

    # Emergency timer
    timer_default_duration_ms: int = 2 * 60 * 60 * 1000
    timer_tick_seconds: float = 1.0

    log_level: str = "INFO"
    rate_limit: str = "100/minute"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:4321",
        "http://127.0.0.1:4321",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


settings = Settings()
