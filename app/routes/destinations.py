"""
DP Travels Backend - Destination Routes
Catalog data for the booking form's destination and cab selectors
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.models import CatalogResponse, DestinationResponse, SubmissionResponse
from app.services.catalog_service import catalog_service

router = APIRouter(prefix="/destinations", tags=["Destinations"])


@router.get("", response_model=CatalogResponse, response_model_by_alias=True)
async def list_destinations():
    """All destinations with cab prices and display labels."""
    return CatalogResponse(
        destinations=[catalog_service.to_response(entry) for entry in catalog_service.list_destinations()]
    )


@router.get(
    "/{name}",
    response_model=DestinationResponse,
    response_model_by_alias=True,
    responses={404: {"model": SubmissionResponse}},
)
async def get_destination(name: str):
    entry = catalog_service.lookup(name)
    if entry is None:
        return JSONResponse(
            status_code=404,
            content=SubmissionResponse(success=False, error="Destination not found").model_dump(exclude_none=True),
        )
    return catalog_service.to_response(entry)
