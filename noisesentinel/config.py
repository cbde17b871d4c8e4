from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/noisesentinel.sqlite3"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8081"]

    jwt_secret_key: str = "change-me-noisesentinel-development-secret"
    jwt_issuer: str = "NoiseSentinel"
    jwt_audience: str = "NoiseSentinelClients"
    jwt_expiry_minutes: int = 60
    bcrypt_rounds: int = 12

    smtp_host: str = ""  # empty = log emails instead of sending (local dev)
    smtp_port: int = 587
    smtp_sender_email: str = "noreply@noisesentinel.local"
    smtp_sender_name: str = "NoiseSentinel"
    smtp_app_password: str = ""
    smtp_use_tls: bool = True

    otp_expiry_minutes: int = 15
    public_access_token_hours: int = 24

    legal_sound_limit_dba: float = 85.0
    duplicate_report_window_minutes: int = 5
    challan_due_days: int = 30
    default_hearing_days: int = 30
    default_bank_details: str = "Account: XXXXXXXXXX, Bank: HBL"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
