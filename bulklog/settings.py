from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./bulklog.db"
    db_pool_size: int = 10
    jwt_secret: str = "dev-secret-change-me"
    token_ttl_days: int = 7
    bcrypt_rounds: int = 12  # bcrypt accepts 4..31
    client_origin: str = "http://localhost:5173"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 4000
    api_base_url: str = "http://localhost:4000/api"  # used by BulkLogClient

    class Config:
        env_file = ".env"
        env_prefix = ""
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
