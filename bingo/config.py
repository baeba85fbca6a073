from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # SQLite for local development; point at PostgreSQL in deployment
    database_url: str = "sqlite:///./bingo.db"
    secret_key: str = "replace-with-a-long-random-secret-key"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days
    app_env: str = "development"  # development, staging, production

    # Message encryption (AES-256-GCM, key derived per message with PBKDF2)
    message_encryption_key: str | None = None
    message_kdf_iterations: int = 100_000

    # Live notifications
    notification_catchup_seconds: int = 5
    notification_heartbeat_seconds: int = 15

    # CORS origins as comma-separated values
    cors_allow_origins: str = "http://localhost:3000"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # Document uploads
    upload_dir: str = "./uploads"
    max_document_upload_mb: int = 10

    # Request guards
    rate_limit_auth_per_min: int = 20
    rate_limit_message_per_min: int = 60
    rate_limit_upload_per_min: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
