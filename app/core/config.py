import os
import json
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import field_validator

project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
env_path = os.path.join(project_root, '.env')
load_dotenv(env_path)


class Settings(BaseSettings):
    # Basic settings
    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "Product Catalog"
    VERSION: str = "0.1.0"

    # CORS settings
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173", "*"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            # JSON array first, then a plain comma separated list
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                if v.startswith("[") and v.endswith("]"):
                    v = v.strip("[]").strip()
                    if v:
                        return [i.strip().strip('"\'') for i in v.split(",")]
                    return []
                return [i.strip() for i in v.split(",") if i.strip()]

        if isinstance(v, list):
            return v

        return []

    # Database settings
    DB_HOST: str = "localhost"
    DB_PORT: str = "3306"
    DB_USER: str = "root"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "product_catalog"

    # Full URI override, e.g. sqlite:///./products.db for local runs
    DATABASE_URI: Optional[str] = None

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """
        Database URI, MySQL unless DATABASE_URI is set
        """
        if self.DATABASE_URI:
            return self.DATABASE_URI

        return f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # Create missing tables on startup
    CREATE_TABLES: bool = True

    # MinIO settings
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_SECURE: bool = False
    # Public base used to build image URLs (CDN or reverse proxy); derived from the endpoint when empty
    MINIO_PUBLIC_URL: Optional[str] = None

    # Product images
    PRODUCT_IMAGE_BUCKET: str = "product-images"
    PRODUCT_IMAGE_FOLDER: str = "products"
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024
    IMAGE_MAX_WIDTH: int = 500
    IMAGE_MAX_HEIGHT: int = 500

    # Barcode allocation
    BARCODE_MAX_ATTEMPTS: int = 5

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8092
    RELOAD: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
