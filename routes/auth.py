import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import or_

from models.User import User
from models.Media import Media
from schemas import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    GoogleLoginRequest,
    AuthResponse,
    UserEnvelope,
    UserUpdate,
    ChangePasswordRequest,
    DeleteAccountRequest,
    MessageResponse,
)
from database import get_db
from services import firebase_service, storage
from utils import get_password_hash, verify_password
from utils.auth import create_access_token, get_current_user
from utils.logger import setup_api_logger

logger = setup_api_logger()
router = APIRouter(prefix="/auth", tags=["Auth"])


def _unique_username(db: Session, email: str) -> str:
    """Derive a free username from the local part of an email address."""
    base = re.sub(r"[^a-zA-Z0-9_.-]", "", email.split("@")[0])[:40] or "traveler"
    candidate = base
    suffix = 1
    while db.query(User).filter(User.username == candidate).first():
        suffix += 1
        candidate = f"{base}{suffix}"
    return candidate


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    exists = db.query(User).filter(
        or_(User.email == payload.email, User.username == payload.username)
    ).first()
    if exists:
        raise HTTPException(status_code=409, detail="User already exists")

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=400, detail="Invalid credentials")

    return {"token": create_access_token(user.id), "user": user}


@router.get("/me", response_model=UserEnvelope)
def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.post("/google", response_model=AuthResponse)
def google_login(payload: GoogleLoginRequest, db: Session = Depends(get_db)):
    """
    Sign in with a Google/Firebase ID token, creating the account on first use.
    """
    try:
        claims = firebase_service.verify_id_token(payload.id_token)
    except firebase_service.FirebaseNotConfigured:
        raise HTTPException(status_code=503, detail="Google sign-in is not available")
    except firebase_service.InvalidIdToken:
        raise HTTPException(status_code=401, detail="Invalid Google token")

    uid = claims.get("uid") or claims.get("sub")
    email = claims.get("email")
    if not uid or not email:
        raise HTTPException(status_code=401, detail="Google token is missing uid or email")

    user = db.query(User).filter(User.firebase_uid == uid).first()
    if not user:
        user = db.query(User).filter(User.email == email).first()
        if user:
            # only a verified address may take over an existing account
            if not claims.get("email_verified"):
                raise HTTPException(status_code=401, detail="Google email is not verified")
            user.firebase_uid = uid
        else:
            user = User(
                username=_unique_username(db, email),
                email=email,
                firebase_uid=uid,
                display_name=claims.get("name"),
                photo_url=claims.get("picture"),
            )
            db.add(user)
            logger.info("Created account for Google user %s", uid)
        db.commit()
        db.refresh(user)

    return {"token": create_access_token(user.id), "user": user}


@router.patch("/me", response_model=UserEnvelope)
def update_me(
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    update_data = payload.model_dump(exclude_unset=True)
    if "username" in update_data and update_data["username"] is None:
        raise HTTPException(status_code=422, detail="username cannot be null")

    username = update_data.get("username")
    if username and username != current_user.username:
        taken = db.query(User).filter(User.username == username, User.id != current_user.id).first()
        if taken:
            raise HTTPException(status_code=409, detail="Username already taken")

    for key, value in update_data.items():
        setattr(current_user, key, value)

    db.commit()
    db.refresh(current_user)
    return {"user": current_user}


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    current_user.password_hash = get_password_hash(payload.new_password)
    db.commit()
    return {"message": "Password changed successfully"}


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(
    payload: DeleteAccountRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete the account and everything it owns. Requires `{"confirm": "DELETE"}`.
    """
    if payload.confirm != "DELETE":
        raise HTTPException(status_code=400, detail='Type "DELETE" to confirm')

    user_id = current_user.id
    stored = [m.storage_key for m in db.query(Media).filter(Media.user_id == user_id).all()]

    db.delete(current_user)
    db.commit()

    for key in stored:
        storage.delete_file(key)
    logger.info("Deleted account %s", user_id)
