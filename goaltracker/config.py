"""Application configuration using Pydantic Settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # MongoDB
    mongodb_url: str
    mongodb_db_name: str = "goal_tracker"

    # JWT
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 10080  # 7 days

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    # Calendar used for "today" (IANA name)
    timezone: str = "UTC"

    # Goal limits
    max_macro_goals: int = 3
    max_macro_anti_goals: int = 3
    max_micro_goals_per_macro: int = 10

    # XP
    default_xp_value: int = 10
    default_target_xp: int = 1000
    streak_bonus_multiplier: float = 0.1  # 10% bonus per day in streak
    max_streak_bonus: float = 2.0

    # Undo restores last_completed from the ledger instead of leaving it on today
    restore_last_completed_on_undo: bool = True

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


settings = Settings()
