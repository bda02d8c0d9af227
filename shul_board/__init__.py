"""Synagogue display board: daily zmanim, insight and schedule."""

from .board import DisplayBoard
from .config import Config

__all__ = ["Config", "DisplayBoard"]
