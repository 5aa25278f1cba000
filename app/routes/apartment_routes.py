import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.apartment_type import ApartmentType
from schemas.apartment_schema import ApartmentCreate, ApartmentResponse, ApartmentUpdate
from services.apartment_service import ApartmentService
from services.storage_service import FileStorage, get_storage
from utils.dependencies import owner_required
from utils.errors import ServiceError
from utils.uploads import read_uploads
from responses.success import created_response, data_response, success_response
from responses.error import internal_server_error, service_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/apartments", tags=["Apartments"])

apartment_service = ApartmentService()


def serialize(apartment) -> dict:
    return ApartmentResponse.model_validate(apartment).model_dump(mode="json")


@router.get("/")
def list_apartments(
    apartment_type: Optional[ApartmentType] = None,
    city: Optional[str] = None,
    max_rent: Optional[float] = None,
    sort: Optional[str] = Query(None, pattern="^(rent_asc|rent_desc|size_desc|newest)$"),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """Public listing of available apartments"""
    apartments = apartment_service.list_available(
        db, apartment_type, city, max_rent, sort, skip, limit
    )
    return data_response([serialize(a) for a in apartments])


@router.get("/mine")
def list_my_apartments(
    db: Session = Depends(get_db), current_user: User = Depends(owner_required)
):
    apartments = apartment_service.get_by_owner(db, current_user.id)
    return data_response([serialize(a) for a in apartments])


@router.get("/{apartment_id}")
def get_apartment(apartment_id: int, db: Session = Depends(get_db)):
    try:
        return data_response(serialize(apartment_service.get_or_404(db, apartment_id)))
    except ServiceError as e:
        return service_error_response(e)


@router.post("/")
async def create_apartment(
    building_id: int = Form(...),
    number: str = Form(...),
    type: ApartmentType = Form(...),
    floor: int = Form(...),
    size: float = Form(..., gt=0),
    base_rent: float = Form(..., gt=0),
    description: Optional[str] = Form(None),
    photos: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    storage: FileStorage = Depends(get_storage),
):
    try:
        apartment_in = ApartmentCreate(
            building_id=building_id,
            number=number,
            type=type,
            floor=floor,
            size=size,
            base_rent=base_rent,
            description=description,
        )
        apartment = apartment_service.create_apartment(
            db, apartment_in, await read_uploads(photos), current_user, storage
        )
        return created_response(serialize(apartment), "Apartment added successfully.")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to create apartment")
        return internal_server_error(str(e))


@router.patch("/{apartment_id}")
async def update_apartment(
    apartment_id: int,
    number: Optional[str] = Form(None),
    type: Optional[ApartmentType] = Form(None),
    floor: Optional[int] = Form(None),
    size: Optional[float] = Form(None, gt=0),
    base_rent: Optional[float] = Form(None, gt=0),
    description: Optional[str] = Form(None),
    photos_to_keep: List[str] = Form([]),
    photos: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    storage: FileStorage = Depends(get_storage),
):
    """
    Update an apartment.

    ``photos_to_keep`` lists the existing photo paths to retain; every other
    existing photo is removed. ``photos`` are appended as new uploads.
    """
    try:
        fields = {
            "number": number,
            "type": type,
            "floor": floor,
            "size": size,
            "base_rent": base_rent,
            "description": description,
        }
        apartment_in = ApartmentUpdate(**{k: v for k, v in fields.items() if v is not None})
        apartment, warnings = apartment_service.update_apartment(
            db,
            apartment_id,
            apartment_in,
            await read_uploads(photos),
            photos_to_keep,
            current_user,
            storage,
        )
        data = serialize(apartment)
        data["warnings"] = warnings
        return success_response("Apartment updated successfully.", data)
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to update apartment %s", apartment_id)
        return internal_server_error(str(e))


@router.delete("/{apartment_id}")
def delete_apartment(
    apartment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    storage: FileStorage = Depends(get_storage),
):
    try:
        warnings = apartment_service.delete_apartment(db, apartment_id, current_user, storage)
        message = "Apartment deleted successfully."
        if warnings:
            message += " Its photos could not be removed: " + "; ".join(warnings)
        return success_response(message, {"warnings": warnings})
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to delete apartment %s", apartment_id)
        return internal_server_error(str(e))
