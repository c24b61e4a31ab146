import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wastecollect.auth.dependencies import require_roles
from wastecollect.core import config
from wastecollect.core.errors import database_error
from wastecollect.core.schemas import ApiModel
from wastecollect.database import get_db
from wastecollect.models.pickup import STATUS_PENDING, Pickup
from wastecollect.models.user import ROLE_DRIVER, User
from wastecollect.routes.pickup_routes import PickupResponse
from wastecollect.services import route_optimizer

router = APIRouter(tags=['driver'])

logger = logging.getLogger(__name__)


class DriverRouteResponse(ApiModel):
    message: str
    pickups: list[PickupResponse]
    route_data: dict[str, Any] | None = None


def vehicle_id_for(driver: User) -> str:
    return f'driver_{driver.id}'


@router.get('/driver/route', response_model=DriverRouteResponse)
def get_driver_route(
    current_user: User = Depends(require_roles(ROLE_DRIVER)),
    db: Session = Depends(get_db),
):
    try:
        pending_pickups = db.query(Pickup).filter(
            Pickup.status == STATUS_PENDING,
        ).order_by(Pickup.id.asc()).all()
    except SQLAlchemyError as exc:
        raise database_error(exc) from exc

    if not pending_pickups:
        return {'message': 'No pending pickups. You are all clear!', 'pickups': []}

    if config.ROUTE_STRATEGY == config.ROUTE_STRATEGY_ALPHABETICAL:
        return {
            'message': 'Route calculated successfully!',
            'pickups': route_optimizer.sort_pickups_alphabetically(pending_pickups),
            'route_data': None,
        }

    try:
        ordered_pickups, solution = route_optimizer.optimize_pickup_order(
            pending_pickups,
            vehicle_id=vehicle_id_for(current_user),
        )
    except route_optimizer.RouteOptimizationError as exc:
        logger.error('Route calculation failed for driver %s: %s', current_user.id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f'Error fetching route: {exc}',
        ) from exc

    return {
        'message': 'Route calculated successfully!',
        'pickups': ordered_pickups,
        'route_data': solution,
    }
