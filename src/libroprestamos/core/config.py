"""
Configuration module for LibroPrestamos.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration: the database URL, the loan
period and the default fine rate.

Usage:
    Import the `settings` object to access configuration throughout the project.
"""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        LOG_LEVEL (str): Logging level used by the scripts.
        SQL_ECHO (bool): Echo SQL statements emitted by the engine.
        LOAN_DURATION_DAYS (int): Days between loan date and due date when no
            due date is given. Shared by every loan.
        DAILY_FINE (float): Default fine charged per overdue day.
        MAX_EBOOK_DOWNLOAD_MB (int): Default download limit for e-books.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./libroprestamos.db")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = "INFO"
    SQL_ECHO: bool = False
    LOAN_DURATION_DAYS: int = 14
    DAILY_FINE: float = 0.5
    MAX_EBOOK_DOWNLOAD_MB: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
