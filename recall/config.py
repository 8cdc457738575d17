from pydantic_settings import BaseSettings
from pathlib import Path

# Get the project root directory (parent of recall package)
PROJECT_ROOT = Path(__file__).parent.parent

class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""
    database_url: str = "sqlite:///./recall.db"
    
    # Logging
    log_level: str = "INFO"
    sql_echo: bool = False
    
    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        env_prefix = "RECALL_"
        extra = "ignore"

settings = Settings()
