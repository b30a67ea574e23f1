"""
Room Catalog Package.

Web frontend for managing a catalog of furnished room layouts stored by a
hosted CRUD API. Includes the FastAPI application, the API client and
configuration.
"""

__version__ = "1.0.0"
__description__ = "Catalog manager for furnished room layouts"

# Export main components
from .app import app  # noqa: E402
from .config import settings  # noqa: E402

__all__ = [
    "app",
    "settings",
    "__version__",
]
