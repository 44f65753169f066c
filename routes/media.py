"""
Media upload, confirmation and download endpoints.
Supports images, videos, audio clips and PDFs stored on local disk.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from models.Media import Media, MediaType
from models.User import User
from schemas import UploadResult, MediaConfirm, MediaRead
from database import get_db
from routes.trips import get_owned_trip
from services import storage
from utils.auth import get_current_user

router = APIRouter(prefix="/media", tags=["Media"])
router2 = APIRouter(prefix="/trips/{trip_id}/photos", tags=["Media"])


def _get_owned_media(db: Session, media_id: int, user: User) -> Media:
    media = db.query(Media).filter(Media.id == media_id, Media.user_id == user.id).first()
    if not media:
        raise HTTPException(status_code=404, detail="Media not found")
    return media


@router.post("/upload", response_model=UploadResult, status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: UploadFile = File(...),
    trip_id: Optional[int] = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Store an uploaded file and register it as unconfirmed media.
    Call /media/confirm afterwards to attach metadata.
    """
    try:
        content_type = storage.resolve_content_type(file.content_type, file.filename)
    except storage.UnsupportedMediaType as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if trip_id is not None:
        get_owned_trip(db, trip_id, current_user)

    content = await file.read()
    limit = storage.max_upload_bytes()
    if len(content) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size: {limit / (1024 * 1024):.1f} MB"
        )

    filename = storage.save_bytes(content, file.filename)
    media = Media(
        user_id=current_user.id,
        trip_id=trip_id,
        media_type=MediaType(storage.media_type_for(content_type)),
        url=storage.file_url(filename),
        storage_key=filename,
        original_filename=file.filename,
        content_type=content_type,
        size=len(content),
        confirmed=False,
    )
    db.add(media)
    db.commit()
    db.refresh(media)

    return {
        "media_id": media.id,
        "url": media.url,
        "filename": filename,
        "original_filename": file.filename,
        "content_type": content_type,
        "size": len(content),
        "media_type": media.media_type,
    }


@router.post("/confirm", response_model=MediaRead)
def confirm_media(
    payload: MediaConfirm,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    media = _get_owned_media(db, payload.media_id, current_user)

    if payload.trip_id is not None:
        get_owned_trip(db, payload.trip_id, current_user)

    for k, v in payload.model_dump(exclude={"media_id"}, exclude_none=True).items():
        setattr(media, k, v)
    media.confirmed = True

    db.commit()
    db.refresh(media)
    return media


@router.get("/files/{filename}")
async def get_media_file(filename: str):
    path = storage.file_path(filename)
    if path is None:
        raise HTTPException(status_code=404, detail="File not found")

    ext = path.suffix.lower().lstrip(".")
    media_type = storage.EXTENSION_TYPES.get(ext, "application/octet-stream")
    return FileResponse(path, media_type=media_type, filename=filename)


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_media(media_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    media = _get_owned_media(db, media_id, current_user)
    key = media.storage_key

    db.delete(media)
    db.commit()
    storage.delete_file(key)


@router2.get("/", response_model=List[MediaRead])
def list_trip_photos(trip_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    get_owned_trip(db, trip_id, current_user)
    return (
        db.query(Media)
        .filter(
            Media.trip_id == trip_id,
            Media.user_id == current_user.id,
            Media.media_type == MediaType.IMAGE,
            Media.confirmed.is_(True),
        )
        .order_by(Media.uploaded_at.desc(), Media.id.desc())
        .all()
    )
