from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./surveydesk.db"
    secret_key: str = "change-me-in-env"
    cors_origins: list[str] = ["*"]
    display_timezone: str = "UTC"

    # one-time codes for respondents
    otp_length: int = 6
    otp_ttl_seconds: int = 600
    otp_max_attempts: int = 5
    otp_resend_cooldown_seconds: int = 60
    verification_token_ttl_seconds: int = 60 * 30

    recent_window_hours: int = 24
    poll_interval_seconds: float = 5.0
    poll_max_attempts: int = 60

    mail_backend: str = "console"  # console | http
    mail_api_url: str | None = None
    mail_api_key: str | None = None
    mail_from: str = "no-reply@surveydesk.local"
    mail_timeout_seconds: float = 5.0

    log_level: str = "INFO"
    log_dir: str | None = None

settings = Settings()
