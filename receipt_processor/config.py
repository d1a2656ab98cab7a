from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    APP_NAME: str = "Receipt Processor"
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # memory | sql
    STORE_BACKEND: str = "memory"
    DATABASE_URL: str = "sqlite+pysqlite:///:memory:"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
