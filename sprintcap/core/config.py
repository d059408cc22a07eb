from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Rebuilt from scratch on every run.
    DATABASE_URL: str = "sqlite:///./data.sqlite"

    # Run inputs. Keep both files out of version control (the arguments
    # file carries the access token).
    ARGUMENTS_FILE: str = "arguments.json"
    POINTS_COMPLETED_FILE: str = "points_completed.json"

    LOG_LEVEL: str = "INFO"

    HTTP_TIMEOUT: float = 30.0
    AZURE_DEVOPS_API_VERSION: str = "7.0"


settings = Settings()
