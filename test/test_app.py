"""Test application entry point"""

from src.main import app


__all__ = ['app']
