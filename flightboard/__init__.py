"""
FlightBoard Backend Package.

Departure/arrival board with live status, built with Flask and SQLAlchemy.

Modules:
    api/          REST endpoints and the live Server-Sent Events stream
    models/       SQLAlchemy ORM model (Flight) and session management
    services/     Status derivation, flight store, broadcaster, use cases
    observers.py  Thread-safe registry of connected observers
    config.py     Centralized configuration from environment variables
"""

__version__ = '1.0.0'
