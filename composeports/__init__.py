"""Scan docker-compose files and report the services that expose ports."""

__version__ = "0.1.0"
