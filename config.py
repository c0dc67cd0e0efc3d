import os
import logging
from typing import List, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Settings(BaseModel):
    course_storage_dir: str = "courses"
    progress_storage_dir: str = "progress"
    log_level: str = "INFO"
    upload_accepted_types: str = ".pdf,.docx,.txt"
    upload_max_size_mb: float = Field(default=10, gt=0)
    generator_url: Optional[str] = None
    generator_timeout: float = Field(default=120, gt=0)

    @property
    def accepted_types(self) -> List[str]:
        return [t.strip() for t in self.upload_accepted_types.split(',') if t.strip()]


def load_settings() -> Settings:
    """Build settings from the environment, reading a .env file first if present"""
    load_dotenv()
    values = {
        'course_storage_dir': os.getenv('COURSE_STORAGE_DIR'),
        'progress_storage_dir': os.getenv('PROGRESS_STORAGE_DIR'),
        'log_level': os.getenv('LOG_LEVEL'),
        'upload_accepted_types': os.getenv('UPLOAD_ACCEPTED_TYPES'),
        'upload_max_size_mb': os.getenv('UPLOAD_MAX_SIZE_MB'),
        'generator_url': os.getenv('GENERATOR_URL'),
        'generator_timeout': os.getenv('GENERATOR_TIMEOUT'),
    }
    return Settings(**{k: v for k, v in values.items() if v is not None})


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
