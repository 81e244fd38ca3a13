"""Provider routing with fallback at handle-construction time."""

from .router import FallbackRouter

__all__ = ["FallbackRouter"]
