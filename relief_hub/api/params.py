"""Shared query parameter parsing."""

from typing import Optional

from fastapi import Query

from relief_hub.db.repositories.help_request_repo import Bounds
from relief_hub.models.requests import parse_coordinate


def bounds_query(
    min_lat: Optional[str] = Query(None, alias="minLat"),
    max_lat: Optional[str] = Query(None, alias="maxLat"),
    min_lng: Optional[str] = Query(None, alias="minLng"),
    max_lng: Optional[str] = Query(None, alias="maxLng"),
) -> Optional[Bounds]:
    """Map bounds when all four are numeric and min < max on both axes; otherwise None."""
    values = (
        parse_coordinate(min_lat, 90),
        parse_coordinate(max_lat, 90),
        parse_coordinate(min_lng, 180),
        parse_coordinate(max_lng, 180),
    )
    if any(v is None for v in values):
        return None
    bounds = Bounds(*values)
    return bounds if bounds.is_valid() else None
