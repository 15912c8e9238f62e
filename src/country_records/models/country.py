"""
Country-related Pydantic models
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Largest value a CQL int column holds
MAX_POPULATION = 2**31 - 1


def parse_population(value: Union[int, float, str]) -> int:
    """Parse a number or numeric string into a positive integer population.

    Fractional values are truncated toward zero. Booleans, non-numeric
    strings, anything that ends up <= 0 and anything above
    MAX_POPULATION are rejected.
    """
    if isinstance(value, bool):
        raise ValueError("population must be a number")

    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("population must be a number")

    if not number.is_finite():
        raise ValueError("population must be a finite number")

    # Bound before int() so huge exponents never expand into giant integers;
    # anything below 1 truncates to 0 or less
    if number < 1:
        raise ValueError("population must be greater than 0")
    if number > MAX_POPULATION:
        raise ValueError(f"population must be at most {MAX_POPULATION}")

    return int(number)


class CountryRecord(BaseModel):
    """A row of the countries table"""
    country: str
    capital: str
    population: int


class CountrySubmitRequest(BaseModel):
    country: str = Field(..., min_length=1)
    capital: str = Field(..., min_length=1)
    population: int

    @field_validator("population", mode="before")
    @classmethod
    def validate_population(cls, value):
        return parse_population(value)


class CountryUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_country: str = Field(..., min_length=1, alias="newCountry")
    capital: str = Field(..., min_length=1)
    population: int

    @field_validator("population", mode="before")
    @classmethod
    def validate_population(cls, value):
        return parse_population(value)


class MessageResponse(BaseModel):
    message: str
