# Models/car.py
import enum
from sqlalchemy import Column, String, Integer, Float, DateTime, JSON
from datetime import datetime
from .base import Base


class CarStatus(str, enum.Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"


class Car(Base):
    __tablename__ = 'cars'

    # Primary identifiers
    id = Column(String, primary_key=True, index=True)

    # Car details
    make = Column(String, nullable=False)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)

    # Lifecycle: customer is only set while reserved or sold
    status = Column(String, nullable=False, default=CarStatus.AVAILABLE.value, index=True)
    customer = Column(JSON(none_as_null=True), nullable=True)

    # Id of the image in the car_images table
    picture = Column(String, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Car {self.make} {self.model} ({self.status})>"
