from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from models.Activity import Activity
from models.JournalEntry import JournalEntry
from models.Media import Media, MediaType
from models.Trip import Trip
from models.User import User
from schemas import StatsRead
from database import get_db
from utils.auth import get_current_user

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("/", response_model=StatsRead)
def get_stats(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    trips = db.query(Trip).filter(Trip.user_id == current_user.id).all()

    return {
        "num_trips": len(trips),
        "journal_count": db.query(JournalEntry).filter(JournalEntry.user_id == current_user.id).count(),
        "total_destinations": sum(len(t.destinations or []) for t in trips),
        "activity_count": db.query(Activity).filter(Activity.user_id == current_user.id).count(),
        "photo_count": db.query(Media).filter(
            Media.user_id == current_user.id,
            Media.media_type == MediaType.IMAGE,
            Media.confirmed.is_(True),
        ).count(),
    }
