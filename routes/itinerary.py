from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

import config
from models.Activity import Activity
from models.User import User
from schemas import ActivityWrite, ActivityUpdate, ActivityRead, ItineraryRead, ItineraryDay
from database import get_db
from routes.trips import get_owned_trip
from utils.auth import get_current_user
from utils.itinerary import group_by_day, resolve_timezone

router = APIRouter(prefix="/trips/{trip_id}/itinerary", tags=["Itinerary"])


def _get_owned_activity(db: Session, trip_id: int, activity_id: int, user: User) -> Activity:
    activity = db.query(Activity).filter(
        Activity.id == activity_id,
        Activity.trip_id == trip_id,
        Activity.user_id == user.id
    ).first()
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")
    return activity


@router.post("/", response_model=ActivityRead, status_code=status.HTTP_201_CREATED)
def create_activity(
    trip_id: int,
    payload: ActivityWrite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_owned_trip(db, trip_id, current_user)

    activity = Activity(**payload.model_dump(), trip_id=trip_id, user_id=current_user.id)
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


@router.get("/", response_model=List[ActivityRead])
def list_activities(trip_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    get_owned_trip(db, trip_id, current_user)
    return (
        db.query(Activity)
        .filter(Activity.trip_id == trip_id, Activity.user_id == current_user.id)
        .order_by(Activity.starts_at, Activity.id)
        .all()
    )


@router.get("/days", response_model=ItineraryRead)
def get_itinerary_days(
    trip_id: int,
    tz: Optional[str] = Query(None, description="IANA time zone for day boundaries"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Group the trip's activities by local calendar day across its date range.
    Activities outside the range are listed in `out_of_range`.
    """
    trip = get_owned_trip(db, trip_id, current_user)

    tz_name = tz or current_user.timezone or config.DEFAULT_TIMEZONE
    try:
        zone = resolve_timezone(tz_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    activities = db.query(Activity).filter(
        Activity.trip_id == trip_id,
        Activity.user_id == current_user.id
    ).all()

    itinerary = group_by_day(trip.start_date, trip.end_date, activities, zone)

    return ItineraryRead(
        trip_id=trip_id,
        timezone=tz_name,
        days=[
            ItineraryDay(
                date=day,
                activities=[ActivityRead.model_validate(a) for a in itinerary.by_day[day]],
            )
            for day in itinerary.days
        ],
        out_of_range=[ActivityRead.model_validate(a) for a in itinerary.out_of_range],
    )


@router.put("/{activity_id}", response_model=ActivityRead)
def update_activity(
    trip_id: int,
    activity_id: int,
    payload: ActivityUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    activity = _get_owned_activity(db, trip_id, activity_id, current_user)

    update_data = payload.model_dump(exclude_unset=True)
    for required in ("title", "activity_type", "starts_at"):
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=422, detail=f"{required} cannot be null")
    for key in ("location", "description"):
        if key in update_data and update_data[key] is None:
            update_data[key] = ""

    for k, v in update_data.items():
        setattr(activity, k, v)

    db.commit()
    db.refresh(activity)
    return activity


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(
    trip_id: int,
    activity_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    activity = _get_owned_activity(db, trip_id, activity_id, current_user)
    db.delete(activity)
    db.commit()
