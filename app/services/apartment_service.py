import logging
import os
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from database.models import Apartment, Building, Tenant, User
from enums.apartment_status import ApartmentStatus
from enums.apartment_type import ApartmentType
from schemas.apartment_schema import ApartmentCreate, ApartmentUpdate
from services.base_service import BaseService
from services.storage_service import FileStorage, filter_photos, validate_photos
from utils.errors import AuthorizationDenied, ConflictError, StorageError, ValidationError

logger = logging.getLogger(__name__)

Photo = Tuple[str, bytes]

SORT_OPTIONS = {
    "rent_asc": Apartment.base_rent.asc(),
    "rent_desc": Apartment.base_rent.desc(),
    "size_desc": Apartment.size.desc(),
    "newest": Apartment.created_at.desc(),
}


def photo_folder(apartment_id: int) -> str:
    return f"apartments/{apartment_id}"


class ApartmentService(BaseService):
    def __init__(self):
        super().__init__(Apartment)

    def list_available(
        self,
        db: Session,
        apartment_type: Optional[ApartmentType] = None,
        city: Optional[str] = None,
        max_rent: Optional[float] = None,
        sort: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Apartment]:
        """Public listing of apartments that can still be rented"""
        query = (
            db.query(Apartment)
            .join(Building)
            .options(joinedload(Apartment.building))
            .filter(Apartment.status == ApartmentStatus.AVAILABLE)
        )
        if apartment_type:
            query = query.filter(Apartment.type == apartment_type)
        if city:
            query = query.filter(Building.city.ilike(f"%{city}%"))
        if max_rent is not None:
            query = query.filter(Apartment.base_rent <= max_rent)

        query = query.order_by(SORT_OPTIONS.get(sort, Apartment.id.asc()))
        return query.offset(skip).limit(limit).all()

    def get_owned(self, db: Session, apartment_id: int, owner: User) -> Apartment:
        apartment = self.get_or_404(db, apartment_id)
        if apartment.building is None or apartment.building.owner_id != owner.id:
            raise AuthorizationDenied("Apartment not found or access denied.")
        return apartment

    def get_by_owner(self, db: Session, owner_id: int) -> List[Apartment]:
        return (
            db.query(Apartment)
            .join(Building)
            .options(joinedload(Apartment.building))
            .filter(Building.owner_id == owner_id)
            .order_by(Building.name, Apartment.number)
            .all()
        )

    def _store_photos(self, storage: FileStorage, apartment_id: int, photos: List[Photo]) -> List[str]:
        paths = []
        for index, (filename, content) in enumerate(photos):
            _, ext = os.path.splitext(filename)
            name = f"photo{index + 1}{ext}"
            paths.append(storage.store(content, filename, photo_folder(apartment_id), name=name))
        return paths

    def create_apartment(
        self,
        db: Session,
        apartment_in: ApartmentCreate,
        photos: List[Photo],
        owner: User,
        storage: FileStorage,
    ) -> Apartment:
        building = db.query(Building).filter(Building.id == apartment_in.building_id).first()
        if building is None or building.owner_id != owner.id:
            raise ValidationError("Invalid building.", field="building_id")

        photos = filter_photos(photos)
        validate_photos(photos)

        apartment = Apartment(**apartment_in.model_dump(), status=ApartmentStatus.AVAILABLE, photos=[])
        db.add(apartment)
        db.flush()

        try:
            apartment.photos = self._store_photos(storage, apartment.id, photos)
            db.commit()
        except StorageError:
            db.rollback()
            self._remove_folder(storage, apartment.id)
            raise

        db.refresh(apartment)
        logger.info("Owner %s added apartment %s", owner.id, apartment.id)
        return apartment

    def update_apartment(
        self,
        db: Session,
        apartment_id: int,
        apartment_in: ApartmentUpdate,
        new_photos: List[Photo],
        photos_to_keep: List[str],
        owner: User,
        storage: FileStorage,
    ) -> Tuple[Apartment, List[str]]:
        """
        Update apartment fields and reconcile its photo list.

        Returns:
            The updated apartment and a list of cleanup warnings for photos
            that could not be removed from storage.
        """
        apartment = self.get_owned(db, apartment_id, owner)
        original = list(apartment.photos or [])
        keep = [path for path in photos_to_keep if path in original]
        new_photos = filter_photos(new_photos)

        if len(keep) + len(new_photos) == 0:
            raise ValidationError("An apartment must have at least one photo.", field="photos")
        validate_photos(new_photos, required=False)

        stored = []
        try:
            for filename, content in new_photos:
                stored.append(storage.store(content, filename, photo_folder(apartment.id)))

            for key, value in apartment_in.model_dump(exclude_unset=True).items():
                setattr(apartment, key, value)
            apartment.photos = keep + stored
            db.commit()
        except Exception:
            db.rollback()
            self._discard_photos(storage, apartment_id, stored)
            raise
        db.refresh(apartment)

        warnings = []
        for path in original:
            if path in keep:
                continue
            try:
                storage.delete(path)
            except StorageError as e:
                warnings.append(e.message)
        return apartment, warnings

    def _discard_photos(self, storage: FileStorage, apartment_id: int, paths: List[str]):
        for path in paths:
            try:
                storage.delete(path)
            except StorageError as e:
                logger.error("Photo cleanup failed for apartment %s: %s", apartment_id, e.message)

    def _remove_folder(self, storage: FileStorage, apartment_id: int) -> Optional[str]:
        try:
            storage.delete_folder(photo_folder(apartment_id))
        except StorageError as e:
            logger.error("Photo cleanup failed for apartment %s: %s", apartment_id, e.message)
            return e.message
        return None

    def delete_apartment(
        self, db: Session, apartment_id: int, owner: User, storage: FileStorage
    ) -> List[str]:
        apartment = self.get_owned(db, apartment_id, owner)
        if apartment.status == ApartmentStatus.RENTED:
            raise ConflictError(
                "Cannot delete an occupied apartment. Please remove the tenant first."
            )
        if db.query(Tenant).filter(Tenant.apartment_id == apartment.id).count():
            raise ConflictError("Cannot delete an apartment with tenancy records.")

        db.delete(apartment)
        db.commit()
        logger.info("Owner %s deleted apartment %s", owner.id, apartment_id)

        warning = self._remove_folder(storage, apartment_id)
        return [warning] if warning else []

    def remove_photo_folders(self, storage: FileStorage, apartment_ids: List[int]) -> List[str]:
        warnings = []
        for apartment_id in apartment_ids:
            warning = self._remove_folder(storage, apartment_id)
            if warning:
                warnings.append(warning)
        return warnings
