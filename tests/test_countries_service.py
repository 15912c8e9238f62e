"""
Service layer tests: validation messages, pagination windows and key handling
"""

import pytest

from country_records.models.country import parse_population
from country_records.services.countries_service import (
    CountriesService,
    POPULATION_INVALID,
    SUBMIT_FIELDS_REQUIRED,
    UPDATE_FIELDS_REQUIRED,
)
from country_records.utils.error_handling import NotFoundError, ValidationError


class TestParsePopulation:

    @pytest.mark.parametrize("value,expected", [
        (1000, 1000),
        ("1000", 1000),
        (" 42 ", 42),
        (12.9, 12),
        ("1e3", 1000),
        ("2147483647", 2147483647),
    ])
    def test_accepts_positive_numbers(self, value, expected):
        assert parse_population(value) == expected

    @pytest.mark.parametrize("value", [0, -1, 0.5, "abc", "Infinity", True, [1], "2147483648", "1e2000000", "-1e2000000"])
    def test_rejects_everything_else(self, value):
        with pytest.raises(ValueError):
            parse_population(value)


class TestValidation:

    @pytest.mark.asyncio
    async def test_non_object_payload(self, empty_store):
        service = CountriesService(empty_store)
        with pytest.raises(ValidationError) as exc_info:
            await service.create_country(["Testland", "Test City", 1000])
        assert exc_info.value.message == SUBMIT_FIELDS_REQUIRED

    @pytest.mark.asyncio
    async def test_missing_field_wins_over_bad_population(self, empty_store):
        service = CountriesService(empty_store)
        with pytest.raises(ValidationError) as exc_info:
            await service.create_country({"country": "Testland", "population": "abc"})
        assert exc_info.value.message == SUBMIT_FIELDS_REQUIRED
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_null_population_counts_as_missing(self, empty_store):
        service = CountriesService(empty_store)
        with pytest.raises(ValidationError) as exc_info:
            await service.create_country({"country": "Testland", "capital": "Test City", "population": None})
        assert exc_info.value.message == SUBMIT_FIELDS_REQUIRED

    @pytest.mark.asyncio
    async def test_numeric_zero_population_counts_as_missing(self, empty_store):
        service = CountriesService(empty_store)
        with pytest.raises(ValidationError) as exc_info:
            await service.create_country({"country": "Testland", "capital": "Test City", "population": 0})
        assert exc_info.value.message == SUBMIT_FIELDS_REQUIRED

    @pytest.mark.asyncio
    async def test_non_string_country(self, empty_store):
        service = CountriesService(empty_store)
        with pytest.raises(ValidationError) as exc_info:
            await service.create_country({"country": 7, "capital": "Test City", "population": 10})
        assert exc_info.value.message == "Invalid value for field 'country'."
        assert exc_info.value.details[0]["field"] == "country"

    @pytest.mark.asyncio
    async def test_update_population_message(self, store):
        service = CountriesService(store)
        with pytest.raises(ValidationError) as exc_info:
            await service.update_country("Kenya", {"newCountry": "Kenya", "capital": "Nairobi", "population": "0"})
        assert exc_info.value.message == POPULATION_INVALID

    @pytest.mark.asyncio
    async def test_update_empty_new_country(self, store):
        service = CountriesService(store)
        with pytest.raises(ValidationError) as exc_info:
            await service.update_country("Kenya", {"newCountry": "", "capital": "Nairobi", "population": 1})
        assert exc_info.value.message == UPDATE_FIELDS_REQUIRED


class TestPagination:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page,limit,expected", [
        (1, 2, ["Kenya", "Japan"]),
        (2, 2, ["Chile"]),
        (3, 1, ["Chile"]),
        (1, 10, ["Kenya", "Japan", "Chile"]),
        (-4, 2, ["Kenya", "Japan"]),
        (1, 0, []),
    ])
    async def test_windows(self, page, limit, expected, store):
        service = CountriesService(store)
        records = await service.list_countries(page=page, limit=limit)
        assert [record.country for record in records] == expected


class TestKeyedOperations:

    @pytest.mark.asyncio
    async def test_create_returns_stored_record(self, empty_store):
        service = CountriesService(empty_store)
        record = await service.create_country({"country": "Testland", "capital": "Test City", "population": "7"})
        assert record.model_dump() == {"country": "Testland", "capital": "Test City", "population": 7}
        assert (await service.get_country("Testland")) == record

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, store):
        service = CountriesService(store)
        with pytest.raises(NotFoundError):
            await service.delete_country("Atlantis")

    @pytest.mark.asyncio
    async def test_rename_onto_existing_key_overwrites_it(self, store):
        service = CountriesService(store)
        await service.update_country("Kenya", {"newCountry": "Japan", "capital": "Nairobi", "population": 1})

        assert "Kenya" not in store.rows
        assert store.rows["Japan"] == {"country": "Japan", "capital": "Nairobi", "population": 1}
        assert len(store.rows) == 2

    @pytest.mark.asyncio
    async def test_same_key_update_does_not_rename(self, store):
        calls = []

        async def rename(*args):
            calls.append(args)

        store.rename = rename
        service = CountriesService(store)
        await service.update_country("Kenya", {"newCountry": "Kenya", "capital": "Kisumu", "population": 2})

        assert calls == []
        assert store.rows["Kenya"]["capital"] == "Kisumu"
