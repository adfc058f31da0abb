from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    environment: str = "development"
    cors_origins: str = "http://localhost:3000"
    user_agent: str = "Mozilla/5.0 (compatible; PixelPlacementHelper/1.0)"
    fetch_timeout: float = 15.0  # seconds
    follow_redirects: bool = True
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_prefix": "PIXEL_"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
