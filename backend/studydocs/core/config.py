from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
from typing import List, Optional


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./studydocs.db"
    DATABASE_ECHO: bool = False

    # AWS S3 (object storage holding the original document files)
    AWS_ACCESS_KEY_ID: str
    AWS_SECRET_ACCESS_KEY: str
    AWS_REGION: str = "us-east-2"
    S3_BUCKET_NAME: str
    AWS_ENDPOINT_URL: Optional[str] = None  # MinIO / LocalStack endpoint

    # Elasticsearch
    ELASTICSEARCH_URL: str = "http://localhost:9200"
    ELASTICSEARCH_USERNAME: Optional[str] = None
    ELASTICSEARCH_PASSWORD: Optional[str] = None
    ELASTICSEARCH_INDEX: str = "documents"
    ELASTICSEARCH_REQUEST_TIMEOUT: int = 10  # seconds, bounds every query

    # Search subsystem
    SEARCH_ENABLED: bool = True
    SEARCH_CONTENT_LIMIT: int = 10_000  # characters of extracted text kept per record
    BULK_INDEX_PAGE_SIZE: int = 50

    # API server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_WORKERS: int = 1

    # Admin endpoints
    ADMIN_API_TOKEN: str

    # Redis Configuration
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    # Celery Configuration
    CELERY_BROKER_URL: str = ""
    CELERY_RESULT_BACKEND: str = ""
    CELERY_WORKER_CONCURRENCY: int = 4

    # Task Configuration
    TASK_SOFT_TIME_LIMIT: int = 240
    TASK_TIME_LIMIT: int = 300

    @field_validator('AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY',
                     'S3_BUCKET_NAME', 'ADMIN_API_TOKEN', mode='before')
    @classmethod
    def validate_required_secrets(cls, v, info):
        if not v or v in ['', 'changeme', 'default']:
            raise ValueError(f'{info.field_name} must be set in environment variables and cannot be empty or use default values')
        return v

    @field_validator('SEARCH_CONTENT_LIMIT', 'BULK_INDEX_PAGE_SIZE')
    @classmethod
    def validate_positive(cls, v, info):
        if v <= 0:
            raise ValueError(f'{info.field_name} must be a positive integer')
        return v

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "StudyDocs"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    model_config = ConfigDict(env_file=".env")

    @property
    def celery_broker_url(self) -> str:
        """Build Celery broker URL from Redis configuration."""
        if self.CELERY_BROKER_URL:
            return self.CELERY_BROKER_URL
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def celery_result_backend(self) -> str:
        """Build Celery result backend URL from Redis configuration."""
        if self.CELERY_RESULT_BACKEND:
            return self.CELERY_RESULT_BACKEND
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB + 1}"

    @property
    def elasticsearch_basic_auth(self) -> Optional[tuple]:
        """Basic auth pair for the Elasticsearch client, if configured."""
        if self.ELASTICSEARCH_USERNAME and self.ELASTICSEARCH_PASSWORD:
            return (self.ELASTICSEARCH_USERNAME, self.ELASTICSEARCH_PASSWORD)
        return None


settings = Settings()
