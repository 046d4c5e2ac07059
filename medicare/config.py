from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackend(Enum):
    FILE = "file"
    MEMORY = "memory"


class ApiConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MEDICARE_API_", env_file=".env", extra="ignore")

    base_url: str = "http://localhost:5000/api"
    timeout: float = 30.0


class SessionConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MEDICARE_SESSION_", env_file=".env", extra="ignore"
    )

    storage: StorageBackend = StorageBackend.FILE
    storage_dir: str = ".medicare"
    storage_key: str = "auth-storage"
    # Seconds between an unauthorized response and the redirect to the login page.
    redirect_delay: float = 0.1
    # Upper bound on how long a route guard waits for rehydration to finish.
    readiness_timeout: float = 0.1
    login_path: str = "/login"
    home_path: str = "/"


class RazorpayConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RAZORPAY_", env_file=".env", extra="ignore")

    test_mode: bool = False
    merchant_name: str = "MediCare Pro"
    description: str = "Medical Appointment Payment"
    theme_color: str = "#4F46E5"


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Unset means the user's system zone decides what "today" is.
    clinic_timezone: str | None = None
    api: ApiConfig = Field(default_factory=lambda: ApiConfig())
    session: SessionConfig = Field(default_factory=lambda: SessionConfig())
    razorpay: RazorpayConfig = Field(default_factory=lambda: RazorpayConfig())
