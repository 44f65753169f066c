# schemas.py (Pydantic v2)
from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Annotated, Optional, List, Literal
from datetime import date, datetime, timezone

from models.Activity import ActivityType
from models.Media import MediaType
from utils.itinerary import resolve_timezone

MIN_PASSWORD_LENGTH = 6


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Datetimes are stored as naive UTC; naive input is taken to be UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _as_aware_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _check_timezone(value: Optional[str]) -> Optional[str]:
    if value is not None:
        resolve_timezone(value)
    return value


UtcIn = Annotated[datetime, AfterValidator(_to_naive_utc)]
UtcOut = Annotated[datetime, AfterValidator(_as_aware_utc)]
TimezoneName = Annotated[str, AfterValidator(_check_timezone)]


# ---------- Users / Auth ----------
class UserRead(BaseModel):
    id: int
    username: str
    email: EmailStr
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    timezone: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username cannot be blank")
        return v

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class GoogleLoginRequest(BaseModel):
    id_token: str = Field(..., min_length=1)

class UserUpdate(BaseModel):
    """Partial update for the signed-in user"""
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)
    photo_url: Optional[str] = None
    timezone: Optional[TimezoneName] = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("username cannot be blank")
        return v

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)

class DeleteAccountRequest(BaseModel):
    confirm: str

class AuthResponse(BaseModel):
    token: str
    user: UserRead

class UserEnvelope(BaseModel):
    user: UserRead

class RegisterResponse(BaseModel):
    message: str
    user: UserRead


# ---------- Shared ----------
class Place(BaseModel):
    name: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

class MessageResponse(BaseModel):
    message: str


# ---------- Trips ----------
class TripBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    destinations: List[Place] = []
    cover_image_url: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be blank")
        return v

class TripWrite(TripBase):
    @model_validator(mode="after")
    def check_date_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self

class TripUpdate(BaseModel):
    """Partial update for trips; the date range is re-checked after merging"""
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    destinations: Optional[List[Place]] = None
    cover_image_url: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class TripRead(TripBase):
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class CoverCleanupResult(BaseModel):
    fixed: int
    skipped: int


# ---------- Journal Entries ----------
class EntryMedia(BaseModel):
    type: Literal["image", "video"]
    url: str

class JournalEntryBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = ""
    media: List[EntryMedia] = []
    location: Optional[Place] = None

class JournalEntryWrite(JournalEntryBase):
    entry_date: Optional[UtcIn] = None

class JournalEntryUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None
    media: Optional[List[EntryMedia]] = None
    location: Optional[Place] = None
    entry_date: Optional[UtcIn] = None

class JournalEntryRead(JournalEntryBase):
    id: int
    entry_date: Optional[UtcOut] = None
    trip_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------- Packing Lists ----------
class PackingItem(BaseModel):
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    packed: bool = False

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v

class PackingListWrite(BaseModel):
    items: List[PackingItem] = []

class PackingItemCreate(BaseModel):
    name: str
    category: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v

class PackingItemUpdate(BaseModel):
    """Empty body toggles `packed`; `category: null` clears the category"""
    name: Optional[str] = None
    category: Optional[str] = None
    packed: Optional[bool] = None

class PackingListRead(BaseModel):
    id: Optional[int] = None
    trip_id: int
    items: List[PackingItem] = []
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ---------- Activities / Itinerary ----------
class ActivityBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    activity_type: ActivityType = ActivityType.ACTIVITY
    location: str = ""
    description: str = ""

class ActivityWrite(ActivityBase):
    starts_at: UtcIn

class ActivityUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    activity_type: Optional[ActivityType] = None
    starts_at: Optional[UtcIn] = None
    location: Optional[str] = None
    description: Optional[str] = None

class ActivityRead(ActivityBase):
    id: int
    starts_at: UtcOut
    trip_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ItineraryDay(BaseModel):
    """Activities falling on one local calendar day"""
    date: date
    activities: List[ActivityRead] = []

class ItineraryRead(BaseModel):
    trip_id: int
    timezone: str
    days: List[ItineraryDay] = []
    out_of_range: List[ActivityRead] = []  # activities outside the trip's dates


# ---------- Stats ----------
class StatsRead(BaseModel):
    num_trips: int
    journal_count: int
    total_destinations: int
    activity_count: int
    photo_count: int


# ---------- Media ----------
class UploadResult(BaseModel):
    media_id: int
    url: str
    filename: str
    original_filename: Optional[str] = None
    content_type: str
    size: int
    media_type: MediaType

class MediaConfirm(BaseModel):
    media_id: int
    trip_id: Optional[int] = None
    caption: Optional[str] = Field(None, max_length=500)
    width: Optional[int] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    duration: Optional[float] = Field(None, ge=0)
    thumb_url: Optional[str] = None

class MediaRead(BaseModel):
    id: int
    user_id: int
    trip_id: Optional[int] = None
    media_type: MediaType
    url: str
    thumb_url: Optional[str] = None
    original_filename: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[float] = None
    caption: str = ""
    confirmed: bool
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)
