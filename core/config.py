"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""
    
    # Source (MongoDB)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "biosamples"
    MONGO_COLLECTION: str = "biosamples"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    
    # Sink (DuckDB)
    OUTPUT_DB: str = "biosample_attributes.db"
    
    # Run limits (LIMIT=0 reads the whole collection)
    LIMIT: int = 10
    TOTAL_BIOSAMPLES: int = 45_000_000
    
    # Logging / diagnostics
    LOG_LEVEL: str = "INFO"
    VERBOSE: bool = False
    PROGRESS_LOG_INTERVAL: int = 10_000
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"
    
    @property
    def expected_total(self) -> int:
        """Document total used for progress reporting"""
        if self.LIMIT > 0:
            return self.LIMIT
        return self.TOTAL_BIOSAMPLES


settings = Settings()
