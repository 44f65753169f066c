from . import auth
from . import trips
from . import journal
from . import packing
from . import itinerary
from . import stats
from . import media

__all__ = [
    "auth",
    "trips",
    "journal",
    "packing",
    "itinerary",
    "stats",
    "media",
]
