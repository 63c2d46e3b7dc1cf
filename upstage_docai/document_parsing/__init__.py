"""Document parsing (digitisation) client."""

from .client import DocumentParsingClient

__all__ = ["DocumentParsingClient"]
