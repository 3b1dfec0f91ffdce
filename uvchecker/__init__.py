"""Top-level package for uvchecker."""

from . import uvc as _uvc

__all__ = ["uvc", "__version__", "get_version"]

__version__ = _uvc.__version__
get_version = _uvc.get_version
