"""
Health check API route
"""

from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends

from country_records.services.countries_service import CountriesService, get_countries_service
from country_records.utils.error_handling import StorageError

router = APIRouter()


@router.get("/health")
async def health_check(
    countries_service: CountriesService = Depends(get_countries_service)
):
    """Health check - reports unhealthy only when the store is unreachable"""
    try:
        database_status = await countries_service.check_health()
    except StorageError as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {e.message}")

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        **database_status
    }
