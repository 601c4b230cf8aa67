"""In-memory stand-in for the MedMe GraphQL API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import httpx

from vaccine_slot_agent.models import Location


def pharmacy_payload(
    pharmacy_id: str,
    *,
    name: Optional[str] = None,
    city: Optional[str] = "Toronto",
    store_no: Optional[str] = None,
    appointment_type_id: Optional[int] = 11,
    waitlisted: Optional[bool] = False,
) -> dict[str, Any]:
    appointment_types = []
    if appointment_type_id is not None:
        appointment_types.append({"id": appointment_type_id, "isWaitlisted": waitlisted})
    return {
        "id": pharmacy_id,
        "name": name or f"Shoppers Drug Mart {pharmacy_id}",
        "storeNo": store_no or pharmacy_id.split("-")[-1],
        "pharmacyAddress": {
            "unit": None,
            "streetNumber": "100",
            "streetName": "Queen St W",
            "city": city,
            "province": "ON",
            "country": "CA",
            "postalCode": "M5H 2N2",
            "longitude": -79.38,
            "latitude": 43.65,
        },
        "pharmacyContact": {"phone": "416-555-0100", "email": None},
        "appointmentTypes": appointment_types,
    }


def make_location(pharmacy_id: str, **kwargs: Any) -> Location:
    return Location.model_validate(pharmacy_payload(pharmacy_id, **kwargs))


def slot_payload(start: str, end: str) -> dict[str, str]:
    return {"startDateTime": start, "endDateTime": end}


@dataclass
class FakeMedMe:
    """Answers the two public queries from canned data.

    ``pharmacies`` maps an appointment type name to the raw store list.
    ``slots`` maps ``(pharmacy_id, start_date)`` to the raw slot list.
    """

    pharmacies: Dict[str, List[dict[str, Any]]] = field(default_factory=dict)
    slots: Dict[tuple[str, str], Optional[List[dict[str, str]]]] = field(default_factory=dict)
    timeout_pharmacies: Set[str] = field(default_factory=set)
    timeout_lookups: Set[str] = field(default_factory=set)
    status_code: int = 200
    requests: List[httpx.Request] = field(default_factory=list)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def bodies(self) -> List[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "unavailable"})

        body = json.loads(request.content)
        variables = body["variables"]
        if body["query"].startswith("query publicGetEnterprisePharmacies"):
            name = variables["appointmentTypeName"]
            if name in self.timeout_lookups:
                raise httpx.ReadTimeout("timed out", request=request)
            data = {"publicGetEnterprisePharmacies": self.pharmacies.get(name, [])}
        else:
            pharmacy_id = variables["pharmacyId"]
            if pharmacy_id in self.timeout_pharmacies:
                raise httpx.ReadTimeout("timed out", request=request)
            key = (pharmacy_id, variables["filter"]["startDate"])
            data = {"publicGetAvailableTimes": self.slots.get(key)}
        return httpx.Response(200, json={"data": data})
