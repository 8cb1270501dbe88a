"""
Public search router: how many breach records carry a username.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ...storage.interfaces import StorageInterface
from ..storage_factory import get_storage


class SearchRequest(BaseModel):
    """Username to look up (matched exactly, case-sensitive)."""

    username: str = Field(..., min_length=1, max_length=255, description="Username to search for")


class SearchResponse(BaseModel):
    """Exposure count for a username."""

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(description="The username searched")
    exposure_count: int = Field(alias="exposureCount", description="Number of breach records found")
    message: str = Field(description="Human-readable summary")


router = APIRouter(prefix="/api", tags=["Search"])


@router.post("/search", response_model=SearchResponse, summary="Count breach exposures for a username")
async def search_username(
    request: SearchRequest,
    storage: StorageInterface = Depends(get_storage),
) -> SearchResponse:
    count = await storage.count_by_username(request.username)
    message = "Username found in data breaches" if count > 0 else "Username not found in any breaches"
    return SearchResponse(username=request.username, exposure_count=count, message=message)
