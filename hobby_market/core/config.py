from pathlib import Path
from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_PATH, env_file_encoding="utf-8", extra="ignore")

    # App
    env: str = "dev"
    service_name: str = "hobby-market"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Public origin used to build OAuth continue URIs
    public_base_url: str = "http://localhost:8000"

    # Firebase project (web config + admin credentials)
    firebase_api_key: SecretStr = SecretStr("IN_ENV")
    firebase_project_id: str = ""
    firebase_storage_bucket: str = ""
    google_application_credentials: str | None = None  # path to service account json; ADC when unset

    # Identity provider
    identity_toolkit_url: str = "https://identitytoolkit.googleapis.com/v1"
    sign_in_provider_id: str = "google.com"

    # Session cookies (Fernet key)
    session_secret_key: SecretStr = SecretStr("IN_ENV")
    session_cookie_secure: bool = False
    session_max_age_seconds: int = 14 * 24 * 3600

    # Telemetry
    telemetry_enabled: bool = True
    otlp_endpoint: str = "http://localhost:4318"  # Jaeger OTLP HTTP


settings = Settings()
