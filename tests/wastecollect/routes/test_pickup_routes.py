import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from wastecollect.models.pickup import Pickup
from wastecollect.routes.pickup_routes import (
    PickupResponse,
    SchedulePickupRequest,
    complete_pickup,
    list_pickups,
    schedule_pickup,
)


def test_schedule_request_accepts_camel_case_and_trims() -> None:
    request = SchedulePickupRequest.model_validate({'wasteType': ' e-waste ', 'address': ' 12   Oak St '})

    assert request.waste_type == 'e-waste'
    assert request.address == '12 Oak St'


@pytest.mark.parametrize(
    'payload',
    [
        {'wasteType': '', 'address': '12 Oak St'},
        {'wasteType': 'glass', 'address': '   '},
        {'address': '12 Oak St'},
    ],
)
def test_schedule_request_requires_waste_type_and_address(payload: dict) -> None:
    with pytest.raises(ValidationError):
        SchedulePickupRequest.model_validate(payload)


def test_pickup_response_serializes_camel_case(make_pickup) -> None:
    pickup = make_pickup('12 Oak St', waste_type='glass')

    body = PickupResponse.model_validate(pickup).model_dump(by_alias=True)

    assert body['wasteType'] == 'glass'
    assert body['status'] == 'Pending'
    assert 'requestedById' in body


def test_schedule_pickup_creates_pending_pickup_for_requester(db, make_user) -> None:
    resident = make_user('resident@example.com')

    response = schedule_pickup(
        SchedulePickupRequest(waste_type='organic', address='5 Pine Rd'),
        current_user=resident,
        db=db,
    )

    stored = db.query(Pickup).one()
    assert response['message'] == 'Pickup scheduled successfully!'
    assert stored.status == 'Pending'
    assert stored.requested_by_id == resident.id
    assert stored.completed_at is None


def test_schedule_pickup_rolls_back_and_returns_500_on_database_error(db, make_user, monkeypatch) -> None:
    resident = make_user('resident@example.com')
    rollbacks = []
    real_rollback = db.rollback

    def failing_commit():
        raise OperationalError('INSERT INTO pickups', {}, Exception('disk full'))

    def recording_rollback():
        rollbacks.append(True)
        real_rollback()

    monkeypatch.setattr(db, 'commit', failing_commit)
    monkeypatch.setattr(db, 'rollback', recording_rollback)

    with pytest.raises(HTTPException) as exception_info:
        schedule_pickup(
            SchedulePickupRequest(waste_type='glass', address='12 Oak St'),
            current_user=resident,
            db=db,
        )

    assert exception_info.value.status_code == 500
    assert exception_info.value.detail.startswith('Database error')
    assert rollbacks == [True]
    assert db.query(Pickup).count() == 0


def test_list_pickups_returns_all_in_creation_order(db, make_user, make_pickup) -> None:
    admin = make_user('admin@example.com', role='admin')
    make_pickup('B Street')
    make_pickup('A Street', status='Completed')

    pickups = list_pickups(current_user=admin, db=db)

    assert [pickup.address for pickup in pickups] == ['B Street', 'A Street']


def test_complete_pickup_marks_pickup_completed(db, make_user, make_pickup) -> None:
    driver = make_user('driver@example.com', role='driver')
    pickup = make_pickup('5 Pine Rd')

    response = complete_pickup(pickup_id=pickup.id, current_user=driver, db=db)

    assert response['message'] == 'Pickup marked as completed!'
    assert response['pickup'].status == 'Completed'
    assert response['pickup'].completed_at is not None


def test_complete_pickup_is_idempotent_for_completed_pickup(db, make_user, make_pickup) -> None:
    admin = make_user('admin@example.com', role='admin')
    pickup = make_pickup('5 Pine Rd')
    complete_pickup(pickup_id=pickup.id, current_user=admin, db=db)
    first_completed_at = db.query(Pickup).one().completed_at

    response = complete_pickup(pickup_id=pickup.id, current_user=admin, db=db)

    assert response['pickup'].status == 'Completed'
    assert response['pickup'].completed_at == first_completed_at


def test_complete_pickup_returns_not_found_when_missing(db, make_user) -> None:
    admin = make_user('admin@example.com', role='admin')

    with pytest.raises(HTTPException) as exception_info:
        complete_pickup(pickup_id=999, current_user=admin, db=db)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Pickup not found'
