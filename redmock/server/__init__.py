"""HTTP front end for the emulator."""

from .api import create_app

__all__ = ["create_app"]
