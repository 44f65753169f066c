from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.JournalEntry import JournalEntry
from models.User import User
from schemas import JournalEntryWrite, JournalEntryUpdate, JournalEntryRead, MessageResponse
from database import get_db
from routes.trips import get_owned_trip
from utils.auth import get_current_user
from utils.geocoding_helpers import fill_coordinates

# Entries are listed/created under their trip and edited by id
router = APIRouter(prefix="/trips/{trip_id}/journal", tags=["Journal"])
router2 = APIRouter(prefix="/journal", tags=["Journal"])


def _get_owned_entry(db: Session, entry_id: int, user: User) -> JournalEntry:
    entry = db.query(JournalEntry).filter(
        JournalEntry.id == entry_id,
        JournalEntry.user_id == user.id
    ).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.get("/", response_model=List[JournalEntryRead])
def list_entries(trip_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    get_owned_trip(db, trip_id, current_user)
    return (
        db.query(JournalEntry)
        .filter(JournalEntry.trip_id == trip_id, JournalEntry.user_id == current_user.id)
        .order_by(
            JournalEntry.entry_date.desc().nulls_last(),
            JournalEntry.created_at.desc(),
            JournalEntry.id.desc(),
        )
        .all()
    )


@router.post("/", response_model=JournalEntryRead, status_code=status.HTTP_201_CREATED)
async def create_entry(
    trip_id: int,
    payload: JournalEntryWrite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_owned_trip(db, trip_id, current_user)

    data = payload.model_dump()
    data["location"] = await fill_coordinates(data["location"])

    entry = JournalEntry(**data, trip_id=trip_id, user_id=current_user.id)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router2.put("/{entry_id}", response_model=JournalEntryRead)
async def update_entry(
    entry_id: int,
    payload: JournalEntryUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = _get_owned_entry(db, entry_id, current_user)

    update_data = payload.model_dump(exclude_unset=True)
    if "title" in update_data and not (update_data["title"] or "").strip():
        raise HTTPException(status_code=422, detail="title cannot be blank")
    for key, empty in (("media", []), ("content", "")):
        if key in update_data and update_data[key] is None:
            update_data[key] = empty
    if update_data.get("location") is not None:
        update_data["location"] = await fill_coordinates(update_data["location"])

    for k, v in update_data.items():
        setattr(entry, k, v)

    db.commit()
    db.refresh(entry)
    return entry


@router2.delete("/{entry_id}", response_model=MessageResponse)
def delete_entry(entry_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    entry = _get_owned_entry(db, entry_id, current_user)
    db.delete(entry)
    db.commit()
    return {"message": "Deleted"}
