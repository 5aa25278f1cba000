import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from schemas.building_schema import BuildingCreate, BuildingResponse, BuildingUpdate
from services.building_service import BuildingService
from services.storage_service import FileStorage, get_storage
from utils.dependencies import owner_required
from utils.errors import ServiceError
from responses.success import created_response, data_response, success_response
from responses.error import internal_server_error, service_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/buildings", tags=["Buildings"])

building_service = BuildingService()


def serialize(building) -> dict:
    return BuildingResponse.model_validate(building).model_dump(mode="json")


@router.post("/")
def create_building(
    building: BuildingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    try:
        created = building_service.create_building(db, building, current_user)
        return created_response(serialize(created), "Building added successfully.")
    except Exception as e:
        logger.exception("Failed to create building")
        return internal_server_error(str(e))


@router.get("/")
def list_buildings(
    db: Session = Depends(get_db), current_user: User = Depends(owner_required)
):
    buildings = building_service.get_by_owner(db, current_user.id)
    return data_response([serialize(b) for b in buildings])


@router.get("/{building_id}")
def get_building(
    building_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    try:
        building = building_service.get_owned(db, building_id, current_user)
        return data_response(serialize(building))
    except ServiceError as e:
        return service_error_response(e)


@router.patch("/{building_id}")
def update_building(
    building_id: int,
    building: BuildingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    try:
        updated = building_service.update_building(db, building_id, building, current_user)
        return success_response("Building updated successfully.", serialize(updated))
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to update building %s", building_id)
        return internal_server_error(str(e))


@router.delete("/{building_id}")
def delete_building(
    building_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    storage: FileStorage = Depends(get_storage),
):
    """Deletes the building with all of its apartments"""
    try:
        warnings = building_service.delete_building(db, building_id, current_user, storage)
        return success_response(
            "Building and its apartments deleted successfully.", {"warnings": warnings}
        )
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to delete building %s", building_id)
        return internal_server_error(str(e))
