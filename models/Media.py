import enum

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from database import Base


class MediaType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"


class Media(Base):
    __tablename__ = "media"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=True, index=True)
    media_type = Column(
        Enum(MediaType, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        nullable=False,
    )
    url = Column(String(500), nullable=False)
    thumb_url = Column(String(500), nullable=True)
    storage_key = Column(String(255), nullable=True)  # file name inside the upload dir
    original_filename = Column(String(255), nullable=True)
    content_type = Column(String(100), nullable=True)
    size = Column(Integer, nullable=True)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    duration = Column(Float, nullable=True)
    caption = Column(String(500), nullable=False, default="")
    confirmed = Column(Boolean, nullable=False, default=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    owner = relationship("User", back_populates="media")
    trip = relationship("Trip", back_populates="media")
