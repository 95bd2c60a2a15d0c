from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

# Photos are passed through exactly as the API returns them.
PhotoItem = Dict[str, Any]


class SearchResponse(BaseModel):
    """JSON envelope of GET /search/photos. Totals come from the x-total header, not the body."""

    model_config = ConfigDict(extra="ignore")

    results: List[PhotoItem]


@dataclass
class SearchPage:
    results: List[PhotoItem]
    # Value of the x-total header, None when missing or not a number
    total: Optional[int] = None


@dataclass
class LoadInitialParams:
    requested_load_size: int
    placeholders_enabled: bool = False


@dataclass
class LoadParams:
    key: int
    requested_load_size: int
