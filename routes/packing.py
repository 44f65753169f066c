from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from models.PackingList import PackingList
from models.User import User
from schemas import PackingListWrite, PackingListRead, PackingItemCreate, PackingItemUpdate
from database import get_db
from routes.trips import get_owned_trip
from utils.auth import get_current_user
from utils import packing

router = APIRouter(prefix="/trips/{trip_id}/packinglist", tags=["Packing List"])


def _get_list(db: Session, trip_id: int, user: User):
    return db.query(PackingList).filter(
        PackingList.trip_id == trip_id,
        PackingList.user_id == user.id
    ).first()


def _save_items(db: Session, trip_id: int, user: User, items: list) -> PackingList:
    """Upsert the trip's list with `items` as its new contents."""
    plist = _get_list(db, trip_id, user)
    if plist is None:
        plist = PackingList(trip_id=trip_id, user_id=user.id, items=items)
        db.add(plist)
    else:
        # JSON columns only track reassignment
        plist.items = items
    db.commit()
    db.refresh(plist)
    return plist


def _apply(mutation, *args, **kwargs) -> list:
    try:
        return mutation(*args, **kwargs)
    except IndexError:
        raise HTTPException(status_code=404, detail="Packing item not found")
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/", response_model=PackingListRead)
def get_packing_list(trip_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    get_owned_trip(db, trip_id, current_user)
    plist = _get_list(db, trip_id, current_user)
    if plist is None:
        return {"trip_id": trip_id, "items": []}
    return plist


@router.put("/", response_model=PackingListRead)
def replace_packing_list(
    trip_id: int,
    payload: PackingListWrite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_owned_trip(db, trip_id, current_user)
    items = [packing.normalize_item(it.model_dump()) for it in payload.items]
    return _save_items(db, trip_id, current_user, items)


@router.post("/items", response_model=PackingListRead)
def add_packing_item(
    trip_id: int,
    payload: PackingItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_owned_trip(db, trip_id, current_user)
    plist = _get_list(db, trip_id, current_user)
    current = plist.items if plist else []
    items = _apply(packing.add_item, current, payload.name, payload.category)
    return _save_items(db, trip_id, current_user, items)


@router.patch("/items/{index}", response_model=PackingListRead)
def update_packing_item(
    trip_id: int,
    index: int,
    payload: PackingItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update one item in place. An empty body toggles its `packed` flag.
    """
    get_owned_trip(db, trip_id, current_user)
    plist = _get_list(db, trip_id, current_user)
    current = plist.items if plist else []

    changes = payload.model_dump(exclude_unset=True)
    for required in ("name", "packed"):
        if required in changes and changes[required] is None:
            raise HTTPException(status_code=422, detail=f"{required} cannot be null")
    if changes:
        items = _apply(packing.update_item, current, index, **changes)
    else:
        items = _apply(packing.toggle_item, current, index)
    return _save_items(db, trip_id, current_user, items)


@router.delete("/items/{index}", response_model=PackingListRead)
def remove_packing_item(
    trip_id: int,
    index: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_owned_trip(db, trip_id, current_user)
    plist = _get_list(db, trip_id, current_user)
    current = plist.items if plist else []
    items = _apply(packing.remove_item, current, index)
    return _save_items(db, trip_id, current_user, items)
