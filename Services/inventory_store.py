# Services/inventory_store.py
"""
Car lifecycle over a document collection and an image store.

Status changes (reserve, cancel, sell) are single conditional updates: the
required starting status is part of the update filter, so two callers racing
for the same car cannot both win. Update and delete read the car first to
find its picture and are best-effort between that read and their final write.
"""
import logging
import uuid
from typing import List, Optional, Union

from Models.car import CarStatus
from Models.schemas import CarAttributes, CarResponse, Customer, DeleteResult, InsertResult, UpdateResult
from Services.blob_store import BlobStore
from Services.collection import DocumentCollection
from Services.exceptions import InvalidArgument, InventoryError, NotFound, PreconditionFailed, StorageError

logger = logging.getLogger(__name__)

AVAILABLE = CarStatus.AVAILABLE.value
RESERVED = CarStatus.RESERVED.value
SOLD = CarStatus.SOLD.value


def parse_status(status: Union[str, CarStatus]) -> CarStatus:
    try:
        return CarStatus(status)
    except ValueError:
        raise InvalidArgument(f"Invalid status provided: {status!r}", field="status") from None


def parse_id(value: str, kind: str = "car") -> str:
    """Normalize an id to its canonical UUID string or raise InvalidArgument."""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise InvalidArgument(f"Invalid {kind} ID: {value!r}", field="id") from None


class InventoryStore:
    def __init__(self, cars: DocumentCollection, images: BlobStore):
        self._cars = cars
        self._images = images

    def list_by_status(self, status: Union[str, CarStatus]) -> List[CarResponse]:
        status = parse_status(status)
        documents = self._cars.find({"status": status.value})
        return [CarResponse.model_validate(document) for document in documents]

    def get_image(self, picture_id: str) -> bytes:
        try:
            picture_id = parse_id(picture_id, kind="picture")
        except InvalidArgument as e:
            raise NotFound(str(e)) from e
        with self._images.open_download_stream(picture_id) as stream:
            return stream.read()

    def create_car(self, attrs: CarAttributes, image_bytes: bytes, image_name: Optional[str]) -> InsertResult:
        if not image_bytes:
            raise InvalidArgument("picture is required", field="picture")

        document = self._editable_fields(attrs)
        document["status"] = AVAILABLE
        document["customer"] = None
        document["picture"] = self._upload_image(image_bytes, image_name)

        try:
            result = self._cars.insert_one(document)
        except StorageError:
            # Drop the image so a failed insert does not leave it orphaned
            logger.error(f"Error inserting car, removing uploaded picture '{document['picture']}'")
            self._discard_image(document["picture"])
            raise

        logger.info(f"Created car '{result.id}' ({attrs.make} {attrs.model})")
        return result

    def update_car(
        self,
        car_id: str,
        attrs: CarAttributes,
        image_bytes: Optional[bytes] = None,
        image_name: Optional[str] = None
    ) -> UpdateResult:
        car_id = parse_id(car_id)
        existing = self._cars.find_one({"id": car_id, "status": AVAILABLE})
        if existing is None:
            raise self._rejected(car_id, AVAILABLE, "update")

        changes = self._editable_fields(attrs)
        changes["status"] = AVAILABLE
        if image_bytes:
            changes["picture"] = self._upload_image(image_bytes, image_name)

        # The status condition is repeated so a car reserved or sold since the
        # read above is left untouched. The old picture is only removed once
        # the car points at the new one.
        try:
            result = self._cars.update_one({"id": car_id, "status": AVAILABLE}, changes)
        except StorageError:
            if "picture" in changes:
                self._discard_image(changes["picture"])
            raise
        if result.matched_count == 0:
            if "picture" in changes:
                self._discard_image(changes["picture"])
            raise self._rejected(car_id, AVAILABLE, "update")

        if "picture" in changes and existing.get("picture"):
            self._discard_image(existing["picture"])

        logger.info(f"Updated car '{car_id}'")
        return result

    def delete_car(self, car_id: str) -> DeleteResult:
        car_id = parse_id(car_id)
        existing = self._cars.find_one({"id": car_id, "status": AVAILABLE})
        if existing is None:
            raise self._rejected(car_id, AVAILABLE, "delete")

        if existing.get("picture"):
            self._delete_image(existing["picture"])

        result = self._cars.delete_one({"id": car_id, "status": AVAILABLE})
        if result.deleted_count == 0:
            raise self._rejected(car_id, AVAILABLE, "delete")

        logger.info(f"Deleted car '{car_id}'")
        return result

    def reserve_car(self, car_id: str, customer: Customer) -> UpdateResult:
        return self._transition(car_id, AVAILABLE, RESERVED, customer, "reserve")

    def cancel_reservation(self, car_id: str) -> UpdateResult:
        return self._transition(car_id, RESERVED, AVAILABLE, None, "cancel reservation for")

    def sell_car(self, car_id: str, customer: Customer) -> UpdateResult:
        return self._transition(car_id, AVAILABLE, SOLD, customer, "sell")

    def _transition(
        self,
        car_id: str,
        from_status: str,
        to_status: str,
        customer: Optional[Customer],
        action: str
    ) -> UpdateResult:
        car_id = parse_id(car_id)
        values = {
            "status": to_status,
            "customer": customer.model_dump(by_alias=True) if customer is not None else None
        }
        result = self._cars.update_one({"id": car_id, "status": from_status}, values)
        if result.matched_count == 0:
            raise self._rejected(car_id, from_status, action)

        logger.info(f"Car '{car_id}' moved from {from_status} to {to_status}")
        return result

    @staticmethod
    def _editable_fields(attrs: CarAttributes) -> dict:
        return attrs.model_dump(include={"make", "model", "year", "price"})

    @staticmethod
    def _rejected(car_id: str, required_status: str, action: str) -> PreconditionFailed:
        logger.info(f"Cannot {action} car '{car_id}': no {required_status} car with that ID")
        return PreconditionFailed(
            f"No {required_status} car with ID '{car_id}'",
            car_id=car_id,
            required_status=required_status
        )

    def _upload_image(self, image_bytes: bytes, image_name: Optional[str]) -> str:
        with self._images.open_upload_stream(image_name) as stream:
            stream.write(image_bytes)
        return stream.file_id

    def _delete_image(self, picture_id: str) -> None:
        try:
            self._images.delete(picture_id)
        except NotFound:
            # Left behind by an earlier delete that failed after removing the image
            logger.warning(f"Picture '{picture_id}' was already missing from the image store")

    def _discard_image(self, picture_id: str) -> None:
        try:
            self._images.delete(picture_id)
        except InventoryError as e:
            logger.error(f"Could not remove orphaned picture '{picture_id}': {e}")
