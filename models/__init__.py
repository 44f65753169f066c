from models.User import User
from models.Trip import Trip
from models.JournalEntry import JournalEntry
from models.PackingList import PackingList
from models.Activity import Activity, ActivityType
from models.Media import Media, MediaType

__all__ = [
    "User",
    "Trip",
    "JournalEntry",
    "PackingList",
    "Activity",
    "ActivityType",
    "Media",
    "MediaType",
]
