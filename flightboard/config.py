"""
Configuration management for FlightBoard.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


def _parse_bool(value: str) -> bool:
    """Parse '1'/'true'/'yes' style flags."""
    return value.strip().lower() in {'1', 'true', 'yes', 'on'}


def _parse_origins(value: str) -> Tuple[str, ...]:
    """Parse comma-separated CORS origins, '*' meaning any."""
    origins = tuple(o.strip() for o in value.split(',') if o.strip())
    return origins or ('*',)


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration."""
    url: str = os.getenv('DATABASE_URL', 'sqlite:///flightboard.db')


@dataclass(frozen=True)
class StatusConfig:
    """Lifecycle window sizes, in minutes relative to the scheduled time."""
    boarding_minutes: int = 30
    departed_minutes: int = 60


@dataclass(frozen=True)
class RealtimeConfig:
    """Live update stream settings."""
    # Max undelivered events per observer before it is dropped
    queue_size: int = int(os.getenv('OBSERVER_QUEUE_SIZE', '100'))
    keepalive_seconds: float = float(os.getenv('EVENT_KEEPALIVE_SECONDS', '15'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    database: DatabaseConfig
    status: StatusConfig
    realtime: RealtimeConfig

    # Seed demo flights into an empty table on startup
    seed_demo_flights: bool

    cors_origins: Tuple[str, ...]

    # Flask settings
    secret_key: str
    debug: bool
    port: int


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        database=DatabaseConfig(),
        status=StatusConfig(),
        realtime=RealtimeConfig(),
        seed_demo_flights=_parse_bool(os.getenv('SEED_DEMO_FLIGHTS', '1')),
        cors_origins=_parse_origins(os.getenv('CORS_ORIGINS', '*')),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
        port=int(os.getenv('PORT', '5000')),
    )


# Singleton instance
config = load_config()
