# Services/car_router.py
from fastapi import APIRouter, HTTPException, Depends, Form, UploadFile, File, Response, status
from fastapi.concurrency import run_in_threadpool
from typing import Any, Dict, Iterable, List, Optional
import os
from Models.schemas import CarAttributes, CarResponse, Customer, DeleteResult, InsertResult, UpdateResult
from Services.inventory_store import InventoryStore
from database import get_inventory

# 10 MiB by default
MAX_IMAGE_BYTES = int(os.getenv('MAX_IMAGE_BYTES', str(10 << 20)))

router = APIRouter(
    responses={404: {"description": "Car not found"}}
)


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """Turn pydantic error entries into a {field: message} map."""
    messages = {}
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = str(loc[-1]) if loc else "request"
        kind = error.get("type", "")
        ctx = error.get("ctx") or {}

        if kind in ("missing", "string_too_short"):
            messages[field] = f"{field} is required"
        elif field == "email":
            messages[field] = f"{field} is not a valid email address"
        elif kind == "greater_than_equal":
            messages[field] = f"{field} must be at least {ctx.get('ge')}"
        elif kind == "greater_than":
            messages[field] = f"{field} must be greater than {ctx.get('gt')}"
        elif kind == "string_pattern_mismatch":
            messages[field] = f"{field} must contain only digits"
        else:
            messages[field] = f"{field} validation failed"
    return messages


async def read_picture(picture: Optional[UploadFile]) -> Optional[bytes]:
    if picture is None:
        return None
    data = await picture.read()
    if len(data) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Picture exceeds {MAX_IMAGE_BYTES} bytes"
        )
    return data


@router.get("/image/{picture_id}", response_class=Response)
def get_car_image(
    picture_id: str,
    store: InventoryStore = Depends(get_inventory)
):
    data = store.get_image(picture_id)
    return Response(content=data, media_type="image/jpeg")


@router.get("/{car_status}", response_model=List[CarResponse])
def list_cars(
    car_status: str,
    store: InventoryStore = Depends(get_inventory)
):
    return store.list_by_status(car_status)


@router.post("", response_model=InsertResult, status_code=status.HTTP_201_CREATED)
async def create_car(
    make: str = Form(...),
    model: str = Form(...),
    year: int = Form(...),
    price: float = Form(...),
    picture: UploadFile = File(...),
    store: InventoryStore = Depends(get_inventory)
):
    attrs = CarAttributes(make=make, model=model, year=year, price=price)
    data = await read_picture(picture)
    return await run_in_threadpool(store.create_car, attrs, data, picture.filename)


@router.put("/{car_id}", response_model=UpdateResult)
async def update_car(
    car_id: str,
    make: str = Form(...),
    model: str = Form(...),
    year: int = Form(...),
    price: float = Form(...),
    picture: Optional[UploadFile] = File(None),
    store: InventoryStore = Depends(get_inventory)
):
    attrs = CarAttributes(make=make, model=model, year=year, price=price)
    data = await read_picture(picture)
    filename = picture.filename if picture is not None else None
    return await run_in_threadpool(store.update_car, car_id, attrs, data, filename)


@router.delete("/{car_id}", response_model=DeleteResult)
def delete_car(
    car_id: str,
    store: InventoryStore = Depends(get_inventory)
):
    return store.delete_car(car_id)


@router.post("/{car_id}/reserve", response_model=UpdateResult)
def reserve_car(
    car_id: str,
    customer: Customer,
    store: InventoryStore = Depends(get_inventory)
):
    return store.reserve_car(car_id, customer)


@router.post("/{car_id}/sell", response_model=UpdateResult)
def sell_car(
    car_id: str,
    customer: Customer,
    store: InventoryStore = Depends(get_inventory)
):
    return store.sell_car(car_id, customer)


@router.post("/{car_id}/cancel-reservation", response_model=UpdateResult)
def cancel_reservation(
    car_id: str,
    store: InventoryStore = Depends(get_inventory)
):
    return store.cancel_reservation(car_id)
