from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from shared.core.auth import validate_current_token
from ...core.dependencies import get_current_restaurant_id, get_store
from ...enum.pos_enum import PosSystem
from ...schemas.pos_import.pos_import_schemas import (
    ConnectionStatus,
    ImportRequest,
    ImportResult,
    PosCredentialsOut,
    PosCredentialsRequest,
    PreviewResult,
    SquareLocation,
)
from ...services.kitchen_store import KitchenStore
from ...services.menu_import_service import MenuImportService

router = APIRouter(prefix="/api/pos-import", tags=["POS Import"], dependencies=[Depends(validate_current_token)])


def get_menu_import_service(store: KitchenStore = Depends(get_store)) -> MenuImportService:
    return MenuImportService(store)


@router.post("/credentials", response_model=PosCredentialsOut)
def save_credentials(
    request: PosCredentialsRequest,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuImportService = Depends(get_menu_import_service)
):
    service.save_credentials(restaurant_id, request.pos_system, request.credentials)
    return PosCredentialsOut(message="POS credentials saved successfully", pos_system=request.pos_system)


@router.get("/verify", response_model=ConnectionStatus)
def verify_connection(
    pos_system: PosSystem = Query(...),
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuImportService = Depends(get_menu_import_service)
):
    return service.verify_connection(restaurant_id, pos_system)


@router.get("/preview", response_model=PreviewResult)
def preview_import(
    pos_system: PosSystem = Query(...),
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuImportService = Depends(get_menu_import_service)
):
    """Dry run: what an import would create or update, without writing anything."""
    return service.preview(restaurant_id, pos_system)


@router.post("/import", response_model=ImportResult)
def import_menu(
    request: ImportRequest,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    service: MenuImportService = Depends(get_menu_import_service)
):
    return service.import_menu(restaurant_id, request.pos_system, request.options)


@router.get("/square/locations", response_model=List[SquareLocation])
def get_square_locations(
    access_token: str = Query(...),
    service: MenuImportService = Depends(get_menu_import_service)
):
    return service.get_square_locations(access_token)
