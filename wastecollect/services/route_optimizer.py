"""Driver route ordering.

Two strategies are available: a plain alphabetical sort on the pickup address,
and a call to the GraphHopper route optimization API whose visit order is
mapped back onto the local pickups by service id.
"""
import logging
from typing import Iterable, Sequence

import requests

from wastecollect.core import config
from wastecollect.models.pickup import Pickup

logger = logging.getLogger(__name__)

DEPOT_LOCATION_ID = 'depot'
SERVICE_ACTIVITY_TYPE = 'service'


class RouteOptimizationError(RuntimeError):
    """Raised when the routing API fails or returns an unusable solution."""


def sort_pickups_alphabetically(pickups: Iterable[Pickup]) -> list[Pickup]:
    return sorted(pickups, key=lambda pickup: ((pickup.address or '').casefold(), pickup.id))


def build_optimization_request(
    pickups: Sequence[Pickup],
    vehicle_id: str,
    depot_address: str,
) -> dict:
    return {
        'vehicles': [
            {
                'vehicle_id': vehicle_id,
                'start_address': {
                    'location_id': DEPOT_LOCATION_ID,
                    'address': depot_address,
                },
            }
        ],
        'services': [
            {
                'id': str(pickup.id),
                'name': pickup.waste_type,
                'address': {
                    'location_id': pickup.address,
                    'address': pickup.address,
                },
            }
            for pickup in pickups
        ],
    }


def _error_message(exc: requests.RequestException) -> str:
    response = exc.response
    if response is None:
        return str(exc)
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get('message'):
        return str(body['message'])
    return response.text or str(exc)


def request_optimized_route(optimization_request: dict) -> dict:
    """POST the request to the routing API and return its ``solution`` object."""
    try:
        response = requests.post(
            config.GRAPHHOPPER_OPTIMIZATION_URL,
            params={'key': config.GRAPHHOPPER_API_KEY},
            json=optimization_request,
            timeout=config.ROUTE_OPTIMIZER_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as exc:
        message = _error_message(exc)
        logger.error('GraphHopper API error: %s', message)
        raise RouteOptimizationError(f'Error from routing API: {message}') from exc

    solution = data.get('solution') if isinstance(data, dict) else None
    if not isinstance(solution, dict) or not solution.get('routes'):
        raise RouteOptimizationError('Error from routing API: solution contains no routes')
    return solution


def order_pickups_by_activities(pickups: Sequence[Pickup], activities: Iterable[dict]) -> list[Pickup]:
    """Follow the activity order, keeping only service stops that match a pickup."""
    pickups_by_service_id = {str(pickup.id): pickup for pickup in pickups}

    ordered: list[Pickup] = []
    for activity in activities:
        if activity.get('type') != SERVICE_ACTIVITY_TYPE:
            continue
        pickup = pickups_by_service_id.get(str(activity.get('id')))
        if pickup is not None:
            ordered.append(pickup)
    return ordered


def optimize_pickup_order(pickups: Sequence[Pickup], vehicle_id: str) -> tuple[list[Pickup], dict]:
    optimization_request = build_optimization_request(pickups, vehicle_id, config.ROUTE_DEPOT_ADDRESS)
    solution = request_optimized_route(optimization_request)
    activities = solution['routes'][0].get('activities') or []
    return order_pickups_by_activities(pickups, activities), solution
