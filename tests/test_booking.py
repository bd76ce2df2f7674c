import pytest
from datetime import date, time, timedelta
from fastapi import status

from banquet_booking.models.booking import Booking, BookingStatus
from banquet_booking.models.notification import Notification

from tests.conf_tests import (
    BOOKING_DATE,
    client,
    clear_db,
    test_db,
    make_user,
    customer,
    auth_headers,
    manager,
    manager_headers,
    test_hall,
    make_booking,
    sent_emails,
    headers_for,
)


def booking_payload(hall_id, **overrides):
    payload = {
        "hall_id": hall_id,
        "booking_date": BOOKING_DATE.isoformat(),
        "start_time": "14:00:00",
        "end_time": "18:00:00",
        "event_name": "Wedding Reception",
        "event_details": "Reception for 120 guests",
        "pax": 120,
        "food_required": True,
        "cost_per_plate": 650,
        "special_equipment_requests": "Extra microphones",
        "event_coordinators": [
            {"name": "Ravi Kumar", "email": "ravi@example.com", "contact": "9876543210"}
        ],
    }
    payload.update(overrides)
    return payload


# pylint: disable-next=redefined-outer-name
def test_create_booking_success(auth_headers, test_hall, customer):
    response = client.post("/bookings/book", json=booking_payload(test_hall.id), headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["hall_id"] == test_hall.id
    assert data["user_id"] == customer.id
    assert data["status"] == "pending"
    assert data["start_time"] == "14:00:00"
    assert data["cost_per_plate"] == 650
    assert data["hall"]["name"] == test_hall.name
    assert data["event_coordinators"][0]["email"] == "ravi@example.com"


# pylint: disable-next=redefined-outer-name
def test_create_booking_unauthorized(test_hall):
    response = client.post("/bookings/book", json=booking_payload(test_hall.id))
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


# pylint: disable-next=redefined-outer-name
def test_create_booking_drops_cost_without_food(auth_headers, test_hall):
    payload = booking_payload(test_hall.id, food_required=False, cost_per_plate=300)
    response = client.post("/bookings/book", json=payload, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["cost_per_plate"] is None


@pytest.mark.parametrize(
    "overrides, detail",
    [
        ({"pax": 0}, "Invalid number of pax"),
        ({"food_required": True, "cost_per_plate": None}, "Invalid cost per plate"),
        ({"food_required": True, "cost_per_plate": -5}, "Invalid cost per plate"),
        ({"start_time": "18:00:00", "end_time": "14:00:00"}, "Invalid Time Slot"),
        ({"start_time": "14:00:00", "end_time": "14:00:00"}, "Invalid Time Slot"),
        ({"pax": 500}, "Hall capacity insufficient"),
    ],
)
# pylint: disable-next=redefined-outer-name
def test_create_booking_invalid_input(auth_headers, test_hall, overrides, detail):
    response = client.post("/bookings/book", json=booking_payload(test_hall.id, **overrides), headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == detail


# pylint: disable-next=redefined-outer-name
def test_create_booking_in_the_past(auth_headers, test_hall):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    response = client.post(
        "/bookings/book", json=booking_payload(test_hall.id, booking_date=yesterday), headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "past" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_create_booking_invalid_coordinator_contact(auth_headers, test_hall):
    payload = booking_payload(
        test_hall.id,
        event_coordinators=[{"name": "Ravi", "email": "ravi@example.com", "contact": "12345"}],
    )
    response = client.post("/bookings/book", json=payload, headers=auth_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# pylint: disable-next=redefined-outer-name
def test_create_booking_hall_not_found(auth_headers):
    response = client.post("/bookings/book", json=booking_payload(999), headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Hall not found"


# pylint: disable-next=redefined-outer-name
def test_create_booking_hall_unavailable(auth_headers, test_hall, test_db):
    test_hall.is_available = False
    test_hall.unavailability_reason = "Renovation"
    test_db.commit()

    response = client.post("/bookings/book", json=booking_payload(test_hall.id), headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "Renovation" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_create_booking_overlapping(auth_headers, test_hall, make_booking):
    make_booking(start_time=time(13, 0), end_time=time(15, 0))
    response = client.post("/bookings/book", json=booking_payload(test_hall.id), headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Hall is already booked for this time"


# pylint: disable-next=redefined-outer-name
def test_create_booking_touching_window_conflicts(auth_headers, test_hall, make_booking):
    make_booking(start_time=time(10, 0), end_time=time(14, 0))
    response = client.post("/bookings/book", json=booking_payload(test_hall.id), headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_create_booking_ignores_rejected_bookings(auth_headers, test_hall, make_booking):
    make_booking(booking_status=BookingStatus.REJECTED_BY_MANAGER, start_time=time(14, 0), end_time=time(18, 0))
    make_booking(booking_status=BookingStatus.REJECTED_BY_ADMIN, start_time=time(15, 0), end_time=time(16, 0))
    response = client.post("/bookings/book", json=booking_payload(test_hall.id), headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED


# pylint: disable-next=redefined-outer-name
def test_create_booking_same_time_other_day(auth_headers, test_hall, make_booking):
    make_booking(start_time=time(14, 0), end_time=time(18, 0), booking_date=BOOKING_DATE + timedelta(days=1))
    response = client.post("/bookings/book", json=booking_payload(test_hall.id), headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED


# pylint: disable-next=redefined-outer-name
def test_get_booking_owner(auth_headers, make_booking):
    booking = make_booking()
    response = client.get(f"/bookings/{booking.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == booking.id


# pylint: disable-next=redefined-outer-name
def test_get_booking_other_user_forbidden(make_booking, make_user):
    booking = make_booking()
    stranger_headers = headers_for(make_user())
    response = client.get(f"/bookings/{booking.id}", headers=stranger_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_get_booking_staff(manager_headers, make_booking):
    booking = make_booking()
    response = client.get(f"/bookings/{booking.id}", headers=manager_headers)
    assert response.status_code == status.HTTP_200_OK


# pylint: disable-next=redefined-outer-name
def test_get_booking_not_found(auth_headers):
    response = client.get("/bookings/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_get_user_bookings(auth_headers, make_booking, make_user):
    own = make_booking()
    make_booking(start_time=time(19, 0), end_time=time(22, 0), owner=make_user())
    response = client.get("/bookings/user", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [b["id"] for b in data] == [own.id]


# pylint: disable-next=redefined-outer-name
def test_get_all_bookings_requires_staff(auth_headers, manager_headers, make_booking):
    make_booking()
    assert client.get("/bookings/all", headers=auth_headers).status_code == status.HTTP_403_FORBIDDEN
    response = client.get("/bookings/all", headers=manager_headers)
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 1


# pylint: disable-next=redefined-outer-name
def test_update_booking_details(auth_headers, make_booking):
    booking = make_booking()
    response = client.patch(
        f"/bookings/{booking.id}",
        json={"event_name": "Renamed Gala", "pax": 100, "food_required": False},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["event_name"] == "Renamed Gala"
    assert data["pax"] == 100
    assert data["cost_per_plate"] is None
    assert data["status"] == "pending"


# pylint: disable-next=redefined-outer-name
def test_update_booking_same_window_does_not_conflict_with_itself(auth_headers, make_booking):
    booking = make_booking(start_time=time(10, 0), end_time=time(12, 0))
    response = client.patch(
        f"/bookings/{booking.id}",
        json={"start_time": "10:00:00", "end_time": "13:00:00"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["end_time"] == "13:00:00"


# pylint: disable-next=redefined-outer-name
def test_update_booking_conflict(auth_headers, make_booking):
    make_booking(start_time=time(15, 0), end_time=time(17, 0))
    booking = make_booking(start_time=time(10, 0), end_time=time(12, 0))
    response = client.patch(
        f"/bookings/{booking.id}",
        json={"start_time": "11:00:00", "end_time": "16:00:00"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Hall is already booked for this time"


# pylint: disable-next=redefined-outer-name
def test_update_booking_invalid_window(auth_headers, make_booking):
    booking = make_booking(start_time=time(10, 0), end_time=time(12, 0))
    response = client.patch(f"/bookings/{booking.id}", json={"start_time": "13:00:00"}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid Time Slot"


# pylint: disable-next=redefined-outer-name
def test_update_booking_past_date(auth_headers, make_booking):
    booking = make_booking()
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    response = client.patch(f"/bookings/{booking.id}", json={"booking_date": yesterday}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Booking date cannot be in the past"


# pylint: disable-next=redefined-outer-name
def test_update_booking_over_capacity(auth_headers, make_booking, test_hall):
    booking = make_booking()
    response = client.patch(
        f"/bookings/{booking.id}", json={"pax": test_hall.capacity + 1}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Hall capacity insufficient"


# pylint: disable-next=redefined-outer-name
def test_update_booking_null_food_keeps_cost_required(auth_headers, make_booking, test_db):
    booking = make_booking()
    response = client.patch(
        f"/bookings/{booking.id}",
        json={"food_required": None, "cost_per_plate": None},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid cost per plate"

    test_db.refresh(booking)
    assert booking.food_required is True
    assert booking.cost_per_plate == 450.0


# pylint: disable-next=redefined-outer-name
def test_update_booking_null_fields_are_ignored(auth_headers, make_booking):
    booking = make_booking()
    response = client.patch(
        f"/bookings/{booking.id}",
        json={"pax": None, "event_name": None, "start_time": None, "additional_details": "Stage needed"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["pax"] == 80
    assert data["event_name"] == "Annual Gala"
    assert data["start_time"] == "10:00:00"
    assert data["cost_per_plate"] == 450.0
    assert data["additional_details"] == "Stage needed"


# pylint: disable-next=redefined-outer-name
def test_update_booking_into_unavailable_hall(auth_headers, make_booking, test_hall, test_db):
    booking = make_booking(start_time=time(10, 0), end_time=time(12, 0))
    test_hall.is_available = False
    test_hall.unavailability_reason = "Renovation"
    test_db.commit()

    response = client.patch(
        f"/bookings/{booking.id}",
        json={"start_time": "13:00:00", "end_time": "15:00:00"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Hall is not available for booking: Renovation"

    test_db.refresh(booking)
    assert booking.start_time == time(10, 0)


# pylint: disable-next=redefined-outer-name
def test_update_details_in_unavailable_hall_allowed(auth_headers, make_booking, test_hall, test_db):
    booking = make_booking()
    test_hall.is_available = False
    test_hall.unavailability_reason = "Renovation"
    test_db.commit()

    response = client.patch(f"/bookings/{booking.id}", json={"event_name": "Renamed"}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK


# pylint: disable-next=redefined-outer-name
def test_update_resets_manager_approval(auth_headers, make_booking, manager, test_db):
    booking = make_booking(booking_status=BookingStatus.APPROVED_BY_MANAGER, manager_id=manager.id)
    response = client.patch(f"/bookings/{booking.id}", json={"pax": 90}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "pending"

    notes = test_db.query(Notification).filter(Notification.user_id == manager.id).all()
    assert len(notes) == 1
    assert "new review" in notes[0].message


@pytest.mark.parametrize("booking_status", [BookingStatus.APPROVED_BY_ADMIN, BookingStatus.BOOKED])
# pylint: disable-next=redefined-outer-name
def test_update_finalized_booking_rejected(auth_headers, make_booking, booking_status):
    booking = make_booking(booking_status=booking_status)
    response = client.patch(f"/bookings/{booking.id}", json={"pax": 90}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Cannot update an approved booking"


# pylint: disable-next=redefined-outer-name
def test_update_booking_not_owner(make_booking, make_user):
    booking = make_booking()
    response = client.patch(f"/bookings/{booking.id}", json={"pax": 90}, headers=headers_for(make_user()))
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_delete_booking_sends_cancellation(auth_headers, make_booking, sent_emails, test_db):
    booking = make_booking()
    booking_id = booking.id
    response = client.delete(f"/bookings/{booking_id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    test_db.expire_all()
    assert test_db.query(Booking).filter(Booking.id == booking_id).first() is None
    assert len(sent_emails) == 1
    assert sent_emails[0]["subject"] == "Banquet Hall Booking Cancelled"
    assert sent_emails[0]["to"] == "asha@example.com"


# pylint: disable-next=redefined-outer-name
def test_delete_booking_without_coordinator_sends_nothing(auth_headers, make_booking, sent_emails):
    booking = make_booking(with_coordinator=False)
    response = client.delete(f"/bookings/{booking.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert sent_emails == []


# pylint: disable-next=redefined-outer-name
def test_delete_approved_booking_rejected(auth_headers, make_booking):
    booking = make_booking(booking_status=BookingStatus.APPROVED_BY_ADMIN)
    response = client.delete(f"/bookings/{booking.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Cannot delete an approved booking"


# pylint: disable-next=redefined-outer-name
def test_delete_booking_not_owner(make_booking, make_user):
    booking = make_booking()
    response = client.delete(f"/bookings/{booking.id}", headers=headers_for(make_user()))
    assert response.status_code == status.HTTP_403_FORBIDDEN
