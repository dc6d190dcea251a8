from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "School Directory"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: str = "5432"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_NAME: str = "school_db"
    DATABASE_SSL_CA: Optional[str] = None

    DATABASE_URL: str = ""
    CREATE_TABLES: bool = False

    def __init__(self, **data):
        super().__init__(**data)
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f'postgresql+psycopg2://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}'
                f'@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}'
            )

    # Image storage
    AWS_REGION: str = "ap-south-1"
    S3_BUCKET_NAME: str = "school-directory-images"
    S3_IMAGE_PREFIX: str = "schoolImages"
    S3_PUBLIC_BASE_URL: Optional[str] = None
    MAX_BLOB_UPLOAD_SIZE: str = "4.5MB"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    """Read settings once, at process start."""
    return Settings()
