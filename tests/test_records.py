import json
from datetime import datetime, timezone

import pytest

from certledger.records import (
    ZERO_TIMESTAMP,
    Enterprise,
    EnterpriseState,
    format_timestamp,
    parse_timestamp,
)

WIRE_FIELDS = {
    "docType", "id", "name", "details", "state", "certificateId", "certificationDate",
    "certifiedBy", "revocationDate", "revocationReason", "blacklistDate", "blacklistReason",
    "previousState", "organizations", "channels", "createdAt", "updatedAt",
}


def test_wire_field_names_and_zero_timestamps():
    e = Enterprise(id="E1", name="Acme", details="desc",
                   created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    doc = json.loads(e.to_json())
    assert set(doc) == WIRE_FIELDS
    assert doc["docType"] == "enterprise"
    assert doc["state"] == "REGISTERED"
    assert doc["certificationDate"] == ZERO_TIMESTAMP
    assert doc["revocationDate"] == ZERO_TIMESTAMP
    assert doc["createdAt"] == "2024-05-01T12:00:00Z"
    assert doc["organizations"] == [] and doc["channels"] == []


def test_decode_preserves_values():
    e = Enterprise(
        id="E1",
        state=EnterpriseState.BLACKLISTED,
        previous_state=EnterpriseState.CERTIFIED,
        blacklist_reason="fraud",
        blacklist_date=datetime(2024, 5, 1, 12, 0, 0, 250000, tzinfo=timezone.utc),
        organizations=["b", "a"],
    )
    back = Enterprise.from_json(e.to_json())
    assert back == e


def test_timestamp_parsing():
    assert parse_timestamp(ZERO_TIMESTAMP) is None
    assert parse_timestamp("") is None
    ts = parse_timestamp("2024-02-03T04:05:06.123456789Z")
    assert ts == datetime(2024, 2, 3, 4, 5, 6, 123456, tzinfo=timezone.utc)
    local = parse_timestamp("2024-02-03T06:05:06+02:00")
    assert local == datetime(2024, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
    assert format_timestamp(datetime(2024, 2, 3, 4, 5, 6)) == "2024-02-03T04:05:06Z"
    with pytest.raises(ValueError):
        parse_timestamp(1714564800)


@pytest.mark.parametrize("payload", [
    {"name": "no id", "state": "REGISTERED"},
    {"id": "E1", "state": "SUSPENDED"},
    {"id": "E1", "state": "REGISTERED", "organizations": "org1"},
    {"id": "E1", "state": "REGISTERED", "createdAt": "yesterday"},
    {"id": "E1", "state": "REGISTERED", "createdAt": 5},
    {"id": "E1", "state": "REGISTERED", "details": 5},
    {"id": "E1", "state": "REGISTERED", "name": ["Acme"]},
    {"id": "E1", "state": "REGISTERED", "channels": ["ch1", 2]},
    {"id": 7, "state": "REGISTERED"},
    ["not", "an", "object"],
])
def test_invalid_records_rejected(payload):
    with pytest.raises(ValueError):
        Enterprise.from_dict(payload)


def test_copy_does_not_share_collections():
    e = Enterprise(id="E1", organizations=["a"])
    c = e.copy(name="x")
    c.organizations.append("b")
    assert e.organizations == ["a"]
    assert c.name == "x"
