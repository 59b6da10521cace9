from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    env: str = "dev"
    access_secret: str = "change_me_access_secret"
    refresh_secret: str = "change_me_refresh_secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_minutes: int = 60 * 24 * 30
    database_url: str = "postgresql+psycopg2://restaurant:restaurant@db:5432/restaurant"
    backend_cors_origins: str = "http://localhost:5173"
    public_dir: str = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "public")
    perishable_categories: str = "food"
    log_level: str = "INFO"
    bcrypt_rounds: int = 12

    # Railway specific - use PORT env var if available
    port: int = int(os.getenv("PORT", "8000"))

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.backend_cors_origins.split(",") if origin.strip()]

    @property
    def perishable_category_set(self) -> set[str]:
        return {c.strip().lower() for c in self.perishable_categories.split(",") if c.strip()}

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
