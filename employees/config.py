"""
Configuration management for the employee directory CLI.
"""

import os
from pathlib import Path
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
load_dotenv()

class Config:
    """Application configuration class."""
    
    # Database Configuration
    DB_NAME: str = os.getenv("EMPLOYEES_DB_NAME", "pmtk")
    DB_USER: str = os.getenv("EMPLOYEES_DB_USER", "root")
    DB_PASSWORD: str = os.getenv("EMPLOYEES_DB_PASSWORD", "")
    DB_HOST: str = os.getenv("EMPLOYEES_DB_HOST", "127.0.0.1")
    DB_PORT: str = os.getenv("EMPLOYEES_DB_PORT", "3307")
    
    # Connection pool bounds, converted by DatabaseConfig
    DB_POOL_MIN: str = os.getenv("EMPLOYEES_DB_POOL_MIN", "0")
    DB_POOL_MAX: str = os.getenv("EMPLOYEES_DB_POOL_MAX", "640")
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    @classmethod
    def get_db_config(cls) -> Dict[str, Any]:
        """Get database configuration as a mapping of recognized options."""
        return {
            "database": cls.DB_NAME,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "pool-min": cls.DB_POOL_MIN,
            "pool-max": cls.DB_POOL_MAX,
        }
    
    @classmethod
    def get_all_config(cls) -> Dict[str, Any]:
        """Get all configuration as dictionary."""
        return {
            "db_name": cls.DB_NAME,
            "db_user": cls.DB_USER,
            "db_password": cls.DB_PASSWORD,
            "db_host": cls.DB_HOST,
            "db_port": cls.DB_PORT,
            "db_pool_min": cls.DB_POOL_MIN,
            "db_pool_max": cls.DB_POOL_MAX,
            "log_level": cls.LOG_LEVEL
        }
