"""Regional market defaults routes."""

from fastapi import APIRouter, Depends, Query

from emlakmetrik.api.deps import get_regional_provider
from emlakmetrik.data.base import RegionalDefaultsSource
from emlakmetrik.models.regional import RegionalDefaults

router = APIRouter(prefix="/api/v1/regional-defaults", tags=["regional"])


@router.get("", response_model=RegionalDefaults)
async def get_regional_defaults(
    location: str = Query("", description='"City, District, Neighborhood"'),
    provider: RegionalDefaultsSource = Depends(get_regional_provider),
):
    """Defaults used to pre-fill the calculator form for a location."""
    return await provider.lookup(location)
