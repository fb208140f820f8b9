"""
Employee Directory Module

Command-line CRUD over a single PostgreSQL table of employees:
- Table and index creation
- Single and bulk inserts of employee records
- Ordered listing and a timed filtered select

Main components:
- models: Employee record, Gender enum and age calculation
- database: connection pool, configuration and the write gateway
- operations: the six operations behind the CLI modes
- cli: argument handling and mode dispatch
- config: configuration management and environment variables
"""

__version__ = "1.0.0"

from .models import Employee, Gender, calculate_age
from .database import DatabaseConfig, DatabaseManager, DatabaseService, PostgresDatabaseService
from .config import Config

__all__ = [
    'Employee',
    'Gender',
    'calculate_age',
    'DatabaseConfig',
    'DatabaseManager',
    'DatabaseService',
    'PostgresDatabaseService',
    'Config',
]
