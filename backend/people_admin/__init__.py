"""people-admin: admin backend for people and their contact details."""

__version__ = "0.1.0"
