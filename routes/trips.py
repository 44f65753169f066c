from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.Trip import Trip
from models.User import User
from models.Media import Media
from schemas import TripWrite, TripUpdate, TripRead, CoverCleanupResult, MessageResponse
from database import get_db
from services import storage
from utils.auth import get_current_user
from utils.geocoding_helpers import fill_destinations
from utils.logger import setup_api_logger

logger = setup_api_logger()
router = APIRouter(prefix="/trips", tags=["Trips"])

BROKEN_COVER_HOSTS = ("localhost", "127.0.0.1")


def get_owned_trip(db: Session, trip_id: int, user: User) -> Trip:
    """Trip `trip_id` if it belongs to `user`; 404 otherwise."""
    trip = db.query(Trip).filter(Trip.id == trip_id, Trip.user_id == user.id).first()
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


@router.post("/", response_model=TripRead, status_code=status.HTTP_201_CREATED)
async def create_trip(
    payload: TripWrite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = payload.model_dump()
    data["destinations"] = await fill_destinations(data["destinations"])

    trip = Trip(**data, user_id=current_user.id)
    db.add(trip)
    db.commit()
    db.refresh(trip)
    return trip


@router.get("/", response_model=List[TripRead])
def list_trips(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return (
        db.query(Trip)
        .filter(Trip.user_id == current_user.id)
        .order_by(Trip.created_at.desc(), Trip.id.desc())
        .all()
    )


@router.post("/cover-images/cleanup", response_model=CoverCleanupResult)
def cleanup_cover_images(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Clear cover image URLs that point at a local development host.
    """
    fixed = 0
    skipped = 0
    for trip in db.query(Trip).filter(Trip.user_id == current_user.id).all():
        if trip.cover_image_url and any(host in trip.cover_image_url for host in BROKEN_COVER_HOSTS):
            trip.cover_image_url = None
            fixed += 1
        else:
            skipped += 1

    db.commit()
    logger.info("Cover cleanup for user %s: fixed=%s skipped=%s", current_user.id, fixed, skipped)
    return {"fixed": fixed, "skipped": skipped}


@router.get("/{trip_id}", response_model=TripRead)
def get_trip(trip_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_owned_trip(db, trip_id, current_user)


@router.put("/{trip_id}", response_model=TripRead)
async def update_trip(
    trip_id: int,
    payload: TripUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    t = get_owned_trip(db, trip_id, current_user)

    update_data = payload.model_dump(exclude_unset=True)
    if "title" in update_data:
        if update_data["title"] is None or not update_data["title"].strip():
            raise HTTPException(status_code=422, detail="title cannot be blank")
        update_data["title"] = update_data["title"].strip()

    start = update_data.get("start_date", t.start_date)
    end = update_data.get("end_date", t.end_date)
    if start and end and end < start:
        raise HTTPException(status_code=422, detail="end_date cannot be before start_date")

    if update_data.get("destinations") is not None:
        update_data["destinations"] = await fill_destinations(update_data["destinations"])
    elif "destinations" in update_data:
        update_data["destinations"] = []

    for k, v in update_data.items():
        setattr(t, k, v)

    db.commit()
    db.refresh(t)
    return t


@router.delete("/{trip_id}", response_model=MessageResponse)
def delete_trip(trip_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    t = get_owned_trip(db, trip_id, current_user)
    stored = [m.storage_key for m in db.query(Media).filter(Media.trip_id == t.id).all()]

    db.delete(t)
    db.commit()

    for key in stored:
        storage.delete_file(key)
    logger.info("Deleted trip %s of user %s", trip_id, current_user.id)
    return {"message": "Deleted"}
