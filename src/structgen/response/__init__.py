"""Sanitizing, repairing and parsing raw model output."""

from .parsing import parse_structured
from .repair import repair
from .sanitizer import sanitize

__all__ = ["parse_structured", "repair", "sanitize"]
