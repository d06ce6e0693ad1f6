#!filepath: housestack/config/__init__.py
from .app_config import AppConfig

__all__ = ["AppConfig"]
