from typing import List

from sqlalchemy.orm import Session

from database.models import Building, Tenant, Apartment, User
from schemas.building_schema import BuildingCreate, BuildingUpdate
from services.apartment_service import ApartmentService
from services.base_service import BaseService
from services.storage_service import FileStorage
from utils.errors import AuthorizationDenied, ConflictError


class BuildingService(BaseService):
    def __init__(self):
        super().__init__(Building)
        self.apartment_service = ApartmentService()

    def create_building(self, db: Session, building_in: BuildingCreate, owner: User) -> Building:
        return self.create(db, building_in, owner_id=owner.id)

    def get_owned(self, db: Session, building_id: int, owner: User) -> Building:
        building = self.get_or_404(db, building_id)
        if building.owner_id != owner.id:
            raise AuthorizationDenied("Not authorized to manage this building.")
        return building

    def get_by_owner(self, db: Session, owner_id: int) -> List[Building]:
        return (
            db.query(Building)
            .filter(Building.owner_id == owner_id)
            .order_by(Building.name)
            .all()
        )

    def update_building(
        self, db: Session, building_id: int, building_in: BuildingUpdate, owner: User
    ) -> Building:
        building = self.get_owned(db, building_id, owner)
        return self.update(db, building, building_in)

    def delete_building(self, db: Session, building_id: int, owner: User, storage: FileStorage) -> List[str]:
        """Delete a building with its apartments; returns photo cleanup warnings"""
        building = self.get_owned(db, building_id, owner)
        has_tenancies = (
            db.query(Tenant)
            .join(Apartment, Tenant.apartment_id == Apartment.id)
            .filter(Apartment.building_id == building.id)
            .count()
        )
        if has_tenancies:
            raise ConflictError(
                "Cannot delete a building whose apartments have tenancy records."
            )
        apartment_ids = [apartment.id for apartment in building.apartments]
        db.delete(building)
        db.commit()
        return self.apartment_service.remove_photo_folders(storage, apartment_ids)
