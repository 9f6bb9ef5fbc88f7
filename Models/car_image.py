# Models/car_image.py
from sqlalchemy import Column, String, Integer, DateTime, LargeBinary
from datetime import datetime
from .base import Base


class CarImage(Base):
    __tablename__ = 'car_images'

    id = Column(String, primary_key=True, index=True)
    filename = Column(String, nullable=True)
    length = Column(Integer, nullable=False, default=0)
    data = Column(LargeBinary, nullable=False)
    upload_date = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<CarImage {self.filename} ({self.length} bytes)>"
