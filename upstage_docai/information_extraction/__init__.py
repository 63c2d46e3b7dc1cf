"""Information extraction and schema generation client."""

from .client import InformationExtractionClient

__all__ = ["InformationExtractionClient"]
