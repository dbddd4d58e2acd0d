from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    quotes_folder: Path = Path("quotes")
    password: str = "banana"
    secret_key: str = "dev-secret-change-me"

    # CSRF token settings
    csrf_algorithm: str = "HS256"
    csrf_expire_minutes: int = 60

    host: str = "0.0.0.0"
    port: int = 8990

    class Config:
        env_file = ".env"
        env_prefix = "QUOTEBOOK_"


settings = Settings()
