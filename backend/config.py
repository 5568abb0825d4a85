"""
Configuration settings for SMS Transaction Extractor.
Centralized configuration management for the application.
"""

import os
from pathlib import Path
from typing import Optional

class Config:
    """Application configuration class."""

    # Application Settings
    APP_NAME = "SMS Transaction Extractor"
    VERSION = "1.0.0"

    # Message Settings
    MAX_MESSAGE_LENGTH: int = int(os.getenv("MAX_MESSAGE_LENGTH", "2000"))
    MAX_BATCH_SIZE: int = int(os.getenv("MAX_BATCH_SIZE", "500"))

    # Output Settings
    OUTPUT_DIR: Path = Path(os.getenv("OUTPUT_DIR", "./output"))
    LOG_DIR: Path = Path(os.getenv("LOG_DIR", "./logs"))
    STORE_PATH: Optional[str] = os.getenv("STORE_PATH") or None

    # Validation Settings
    STRICT_MODE: bool = os.getenv("STRICT_MODE", "false").lower() == "true"

    # Logging Settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE", "sms_extractor.log") or None

    # API Settings
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    @classmethod
    def ensure_directories(cls):
        """Ensure required directories exist."""
        cls.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get_output_path(cls, filename: str) -> Path:
        """Get full path for output file."""
        cls.ensure_directories()
        return cls.OUTPUT_DIR / filename

    @classmethod
    def get_log_path(cls, filename: str) -> Path:
        """Get full path for log file."""
        cls.ensure_directories()
        return cls.LOG_DIR / filename

    @classmethod
    def validate_message(cls, text: str) -> tuple[bool, Optional[str]]:
        """
        Validate an inbound message before processing.

        Returns:
            tuple: (is_valid, error_message)
        """
        if not isinstance(text, str):
            return False, "Message must be a string"

        if len(text) > cls.MAX_MESSAGE_LENGTH:
            return False, f"Message too long ({len(text)} characters). Maximum: {cls.MAX_MESSAGE_LENGTH}"

        return True, None

    @classmethod
    def to_dict(cls) -> dict:
        """Convert configuration to dictionary."""
        return {
            "app_name": cls.APP_NAME,
            "version": cls.VERSION,
            "max_message_length": cls.MAX_MESSAGE_LENGTH,
            "max_batch_size": cls.MAX_BATCH_SIZE,
            "output_dir": str(cls.OUTPUT_DIR),
            "log_dir": str(cls.LOG_DIR),
            "store_path": cls.STORE_PATH,
            "strict_mode": cls.STRICT_MODE,
            "log_level": cls.LOG_LEVEL,
        }


# Create a singleton instance
config = Config()
