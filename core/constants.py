"""Global constants for the core package.

This module contains shared constants used across the application core.
"""

from typing import Final

# HTTP Client Constants
HTTP_CONNECTION_LIMIT: Final[int] = 10
HTTP_TIMEOUT_CONNECT: Final[float] = 10.0
HTTP_TIMEOUT_SOCK_READ: Final[float] = 30.0
HTTP_TIMEOUT_TOTAL: Final[float] = 60.0
HTTP_USER_AGENT: Final[str] = "BusTrackIndia/4.0"

# Earth radius used by every great-circle calculation
EARTH_RADIUS_KM: Final[float] = 6371.0
EARTH_RADIUS_METERS: Final[float] = 6371000.0

# Distance Conversion
METERS_PER_KM: Final[float] = 1000.0
