"""
Countries service - business logic for country records
"""

import logging
from typing import Any, Dict, List, Type, TypeVar

import pydantic
from fastapi import Request

from country_records.database.country_store import CountryStore
from country_records.models.country import CountryRecord, CountrySubmitRequest, CountryUpdateRequest
from country_records.utils.error_handling import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SUBMIT_FIELDS_REQUIRED = "All fields (country, capital, population) are required."
UPDATE_FIELDS_REQUIRED = "All fields (newCountry, capital, population) are required."
POPULATION_INVALID = "Population must be a valid positive number."
COUNTRY_NOT_FOUND = "Country not found."

RequestModel = TypeVar("RequestModel", bound=pydantic.BaseModel)


def is_blank(value: Any) -> bool:
    """None, empty strings, numeric zero and False all count as a missing field"""
    if isinstance(value, (bool, int, float)):
        return not value
    return value is None or value == ""


def validate_payload(model: Type[RequestModel], payload: Any, required_message: str) -> RequestModel:
    """
    Validate a request body against a request model

    Missing or empty fields are reported before a bad population, so a payload
    with both problems gets the required-fields message.
    """
    if not isinstance(payload, dict):
        raise ValidationError(required_message)

    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = e.errors()
        details = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in errors
        ]

        for error in errors:
            if error["type"] in ("missing", "string_too_short") or is_blank(error.get("input")):
                raise ValidationError(required_message, details) from e

        if any(error["loc"] and error["loc"][0] == "population" for error in errors):
            raise ValidationError(POPULATION_INVALID, details) from e

        raise ValidationError(f"Invalid value for field '{details[0]['field']}'.", details) from e


class CountriesService:
    """Service for country record operations"""

    def __init__(self, store: CountryStore):
        self.store = store

    async def create_country(self, payload: Any) -> CountryRecord:
        """
        Create a country record, overwriting any record with the same name

        Args:
            payload: Request body with country, capital and population

        Returns:
            The stored record
        """
        request = validate_payload(CountrySubmitRequest, payload, SUBMIT_FIELDS_REQUIRED)

        logger.info(f"Creating country: {request.country}")
        await self.store.upsert(request.country, request.capital, request.population)

        return CountryRecord(country=request.country, capital=request.capital, population=request.population)

    async def list_countries(self, page: int = 1, limit: int = 10) -> List[CountryRecord]:
        """
        List a page of countries in store scan order

        Args:
            page: 1-based page number
            limit: Maximum number of countries to return

        Returns:
            Up to `limit` records starting at (page - 1) * limit
        """
        if limit <= 0:
            return []

        offset = max((page - 1) * limit, 0)
        rows = await self.store.fetch_page(limit, offset)
        return [CountryRecord(**row) for row in rows]

    async def get_country(self, country: str) -> CountryRecord:
        row = await self.store.get(country)
        if not row:
            raise NotFoundError(COUNTRY_NOT_FOUND)
        return CountryRecord(**row)

    async def delete_country(self, country: str) -> None:
        deleted = await self.store.delete_if_exists(country)
        if not deleted:
            raise NotFoundError(COUNTRY_NOT_FOUND)
        logger.info(f"Deleted country: {country}")

    async def update_country(self, country: str, payload: Any) -> CountryRecord:
        """
        Update a country record, renaming it when newCountry differs

        Args:
            country: Current name of the country
            payload: Request body with newCountry, capital and population

        Returns:
            The record as stored under its new name
        """
        request = validate_payload(CountryUpdateRequest, payload, UPDATE_FIELDS_REQUIRED)

        # Existence check and write are separate round trips
        if not await self.store.get(country):
            raise NotFoundError(COUNTRY_NOT_FOUND)

        if request.new_country == country:
            await self.store.upsert(country, request.capital, request.population)
        else:
            logger.info(f"Renaming country: {country} -> {request.new_country}")
            await self.store.rename(country, request.new_country, request.capital, request.population)

        return CountryRecord(country=request.new_country, capital=request.capital, population=request.population)

    async def check_health(self) -> Dict[str, Any]:
        await self.store.ping()
        return {"database": "connected"}


def get_countries_service(request: Request) -> CountriesService:
    """FastAPI dependency building the service around the app's country store"""
    return CountriesService(request.app.state.country_store)
