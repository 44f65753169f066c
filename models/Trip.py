from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base

class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text)
    # Ordered list of {"name", "lat", "lng"}
    destinations = Column(JSON, nullable=False, default=list)
    cover_image_url = Column(String(500), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    owner = relationship("User", back_populates="trips")
    entries = relationship("JournalEntry", back_populates="trip", cascade="all, delete-orphan")
    packing_list = relationship("PackingList", back_populates="trip", uselist=False, cascade="all, delete-orphan")
    activities = relationship("Activity", back_populates="trip", cascade="all, delete-orphan")
    media = relationship("Media", back_populates="trip", cascade="all, delete-orphan")
