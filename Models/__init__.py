# Models/__init__.py
from .base import Base
from .car import Car, CarStatus
from .car_image import CarImage

# List all models for easy access and database initialization
__all__ = [
    'Base',
    'Car',
    'CarImage',
    'CarStatus'
]
