import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from database import Base


class ActivityType(str, enum.Enum):
    ACTIVITY = "Activity"
    ACCOMMODATION = "Accommodation"
    FOOD = "Food & Dining"
    TRANSPORT = "Transport"
    OTHER = "Other"


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    activity_type = Column(
        Enum(ActivityType, values_callable=lambda e: [m.value for m in e], native_enum=False, length=40),
        nullable=False,
        default=ActivityType.ACTIVITY,
    )
    starts_at = Column(DateTime, nullable=False, index=True)  # naive UTC
    location = Column(String(250), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    trip = relationship("Trip", back_populates="activities")
