from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=True)  # None for Google-only accounts
    firebase_uid = Column(String(128), unique=True, index=True, nullable=True)
    display_name = Column(String(100), nullable=True)
    photo_url = Column(String(500), nullable=True)
    timezone = Column(String(64), nullable=True)  # IANA name used for itinerary days
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    trips = relationship("Trip", back_populates="owner", cascade="all, delete-orphan")
    media = relationship("Media", back_populates="owner", cascade="all, delete-orphan")
