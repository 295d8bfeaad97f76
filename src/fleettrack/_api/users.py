"""User and vehicle access endpoints.

Endpoints:
  - GET /api/users
  - GET /api/users/{id}/vehicles
"""

from __future__ import annotations

from urllib.parse import quote

from fleettrack._api._common import parse_items, unwrap_list
from fleettrack._transport import Transport
from fleettrack.models.user import User, UserVehicle


async def fetch_users(transport: Transport) -> list[User]:
    endpoint = "/api/users"
    decoded = await transport.request_json("GET", endpoint)
    return parse_items(User, unwrap_list(decoded), endpoint=endpoint)


async def fetch_user_vehicles(transport: Transport, user_id: str) -> list[UserVehicle]:
    """Vehicles granted to *user_id*; grants for other users are discarded."""
    endpoint = f"/api/users/{quote(user_id, safe='')}/vehicles"
    decoded = await transport.request_json("GET", endpoint)
    grants = parse_items(UserVehicle, unwrap_list(decoded), endpoint=endpoint)
    return [grant for grant in grants if grant.user_id == user_id]
