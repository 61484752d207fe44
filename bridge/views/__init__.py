"""Pydantic schemas used as views in the MVC architecture."""

from .process import CombinedResponse

__all__ = ["CombinedResponse"]
