import pytest

from errors import MissingAvailabilityKey, MissingHolderName, MissingHolderSurname
from schemas.payloads import CreateBookingPayload, Payment
from services.booking_builder import (
    build_booking_request,
    build_payments,
    normalize_quantities,
    validate_booking_payload,
)

KEY_PAYLOAD = {
    "items": [{
        "productCode": "120",
        "startTimeLocal": "2026-03-15T18:00:00",
        "quantities": [{"optionLabel": "Adult", "value": 2}, {"optionLabel": "Child", "value": 1}],
    }],
    "totalAmount": 375,
}

HOLDER = {"name": "John", "surname": "Doe", "emailAddress": "john.doe@example.com", "phoneNumber": "+1234567890"}


def _payload(**overrides):
    base = {"availabilityKey": "signed", "holder": dict(HOLDER)}
    base.update(overrides)
    return CreateBookingPayload(**base)


def _names(participant):
    return [f["value"] for f in participant["fields"][:2]]


# ---------------------------------------------------------------------
# validation
# ---------------------------------------------------------------------

def test_validation_order():
    with pytest.raises(MissingAvailabilityKey):
        validate_booking_payload(CreateBookingPayload(holder={"name": "John"}))
    with pytest.raises(MissingHolderName):
        validate_booking_payload(CreateBookingPayload(availabilityKey="k", holder={"surname": "Doe"}))
    with pytest.raises(MissingHolderName):
        validate_booking_payload(CreateBookingPayload(availabilityKey="k"))
    with pytest.raises(MissingHolderSurname) as exc:
        validate_booking_payload(CreateBookingPayload(availabilityKey="k", holder={"name": "John"}))
    assert "surname is required" in str(exc.value)


# ---------------------------------------------------------------------
# construction
# ---------------------------------------------------------------------

def test_build_request_defaults():
    body = build_booking_request(KEY_PAYLOAD, _payload())

    assert body["customer"] == {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@example.com",
        "phone": "+1234567890",
    }
    item = body["items"][0]
    assert item["productCode"] == "120"
    assert item["quantities"] == [{"optionLabel": "Adult", "value": 2}, {"optionLabel": "Child", "value": 1}]
    assert len(item["participants"]) == 3
    assert all(_names(p) == ["John", "Doe"] for p in item["participants"])
    assert "pickupLocation" not in item
    assert body["payments"] == [{"amount": 375.0, "type": "CASH", "recipient": "SUPPLIER", "label": "Payment"}]
    for optional in ("internalNotes", "resellerReference", "resellerId", "createdBy"):
        assert optional not in body


def test_collect_email_is_omitted():
    holder = dict(HOLDER, emailAddress="COLLECT")
    body = build_booking_request(KEY_PAYLOAD, _payload(holder=holder))
    assert "email" not in body["customer"]


def test_optional_fields_included_when_given():
    body = build_booking_request(
        KEY_PAYLOAD,
        _payload(notes="vegan", reference="ABC-1", pickupPoint="Hotel Vancouver", createdBy={"firstName": "Agent"},
                 holder=dict(HOLDER, country="CA")),
        reseller_id="fed321",
    )
    assert body["internalNotes"] == "vegan"
    assert body["resellerReference"] == "ABC-1"
    assert body["resellerId"] == "fed321"
    assert body["createdBy"] == {"firstName": "Agent"}
    assert body["customer"]["countryCode"] == "CA"
    assert body["items"][0]["pickupLocation"] == {"locationName": "Hotel Vancouver"}


def test_payload_reseller_id_wins_over_token():
    body = build_booking_request(KEY_PAYLOAD, _payload(resellerId="aaa"), reseller_id="bbb")
    assert body["resellerId"] == "aaa"


def test_supplied_participants_are_padded():
    body = build_booking_request(KEY_PAYLOAD, _payload(participants=[
        {"name": "Ann", "surname": "Lee", "extraFields": {"Dietary": "vegan"}},
    ]))
    participants = body["items"][0]["participants"]

    assert len(participants) == 3
    assert participants[0]["fields"] == [
        {"label": "First Name", "value": "Ann"},
        {"label": "Last Name", "value": "Lee"},
        {"label": "Dietary", "value": "vegan"},
    ]
    assert _names(participants[1]) == ["John", "Doe"]


def test_field_list_participants_pass_through():
    fields = [{"label": "First Name", "value": "Ann"}, {"label": "Passport", "value": "X123"}]
    body = build_booking_request(KEY_PAYLOAD, _payload(participants=[{"fields": fields}]))
    assert body["items"][0]["participants"][0] == {"fields": fields}


def test_at_least_one_participant():
    key = {"items": [{"productCode": "120", "startTimeLocal": "t", "quantities": []}], "totalAmount": 0}
    body = build_booking_request(key, _payload())
    assert len(body["items"][0]["participants"]) == 1


def test_legacy_quantity_shape():
    assert normalize_quantities([{"label": "Adult", "quantity": 2}, {"optionLabel": "Child", "value": "1"}]) == [
        {"optionLabel": "Adult", "value": 2},
        {"optionLabel": "Child", "value": 1},
    ]


def test_supplied_payments_are_coerced():
    payments = build_payments(
        [Payment(amount="120.5", type="CREDITCARD"), Payment(amount="abc"), Payment(amount=-5, label="Refund")],
        total_amount=999,
    )
    assert payments[0] == {"amount": 120.5, "type": "CREDITCARD", "recipient": "SUPPLIER", "label": "Payment"}
    assert payments[1]["amount"] == 0
    assert payments[2] == {"amount": 0, "type": "CASH", "recipient": "SUPPLIER", "label": "Refund"}


def test_invalid_key_total_becomes_zero_payment():
    body = build_booking_request({"items": [], "totalAmount": "n/a"}, _payload())
    assert body["payments"] == [{"amount": 0, "type": "CASH", "recipient": "SUPPLIER", "label": "Payment"}]
