"""Media host infrastructure package."""

from .cloudinary_media_host import CloudinaryMediaHost

__all__ = ["CloudinaryMediaHost"]
