"""
Country record API routes
Request bodies are validated in the service layer so that every caller gets
the same 400 messages.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Query

from country_records.models.country import CountryRecord, MessageResponse
from country_records.services.countries_service import CountriesService, get_countries_service

router = APIRouter()


@router.post("/submit", response_model=MessageResponse)
async def submit_country(
    payload: Any = Body(None),
    countries_service: CountriesService = Depends(get_countries_service)
):
    """Insert a country, overwriting an existing one with the same name"""
    await countries_service.create_country(payload)
    return {"message": "Data inserted successfully"}


@router.get("/countries", response_model=List[CountryRecord])
async def list_countries(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(10, description="Maximum number of countries per page"),
    countries_service: CountriesService = Depends(get_countries_service)
):
    """List countries with offset pagination; order follows the store scan"""
    return await countries_service.list_countries(page=page, limit=limit)


@router.get("/countries/{country}", response_model=CountryRecord)
async def get_country(
    country: str,
    countries_service: CountriesService = Depends(get_countries_service)
):
    """Look up a single country by exact name"""
    return await countries_service.get_country(country)


@router.delete("/countries/{country}", response_model=MessageResponse)
async def delete_country(
    country: str,
    countries_service: CountriesService = Depends(get_countries_service)
):
    """Delete a country; 404 when no row matches"""
    await countries_service.delete_country(country)
    return {"message": "Country deleted successfully"}


@router.put("/countries/{country}", response_model=MessageResponse)
async def update_country(
    country: str,
    payload: Any = Body(None),
    countries_service: CountriesService = Depends(get_countries_service)
):
    """Update a country's details, renaming it when newCountry differs"""
    await countries_service.update_country(country, payload)
    return {"message": "Country updated successfully"}
