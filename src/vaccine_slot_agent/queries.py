"""GraphQL documents and payload parsing for the MedMe public API."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from typing import Any, Mapping

from .config import AppointmentCategory, Settings
from .date_window import DateWindow
from .models import Location, LocationQueryResult, SlotQueryResult, TimeSlot

PARTY_SIZE = 1

PHARMACIES_QUERY = textwrap.dedent(
    """
    query publicGetEnterprisePharmacies($appointmentTypeName: String, $enterpriseName: String!, $storeNo: String) {
      publicGetEnterprisePharmacies(appointmentTypeName: $appointmentTypeName, enterpriseName: $enterpriseName, storeNo: $storeNo) {
        id
        name
        storeNo
        pharmacyAddress {
          unit
          streetNumber
          streetName
          city
          province
          country
          postalCode
          longitude
          latitude
        }
        pharmacyContact {
          phone
          email
        }
        appointmentTypes {
          id
          isWaitlisted
        }
      }
    }
    """
).strip()

AVAILABLE_TIMES_QUERY = textwrap.dedent(
    """
    query publicGetAvailableTimes($pharmacyId: String, $appointmentTypeId: Int!, $noOfPeople: Int!, $filter: AvailabilityFilter!) {
      publicGetAvailableTimes(pharmacyId: $pharmacyId, appointmentTypeId: $appointmentTypeId, noOfPeople: $noOfPeople, filter: $filter) {
        startDateTime
        endDateTime
      }
    }
    """
).strip()


@dataclass(frozen=True)
class GraphQLRequest:
    """A query document with its variables and any per-request headers."""

    operation: str
    query: str
    variables: Mapping[str, Any]
    headers: Mapping[str, str] = field(default_factory=dict)

    def body(self) -> dict[str, Any]:
        return {"query": self.query, "variables": dict(self.variables)}


def build_pharmacies_query(settings: Settings, category: AppointmentCategory) -> GraphQLRequest:
    """Location lookup for every store offering ``category``."""
    return GraphQLRequest(
        operation="publicGetEnterprisePharmacies",
        query=PHARMACIES_QUERY,
        variables={
            "appointmentTypeName": category.capability_name,
            "enterpriseName": settings.enterprise_name,
        },
    )


def build_available_times_query(location: Location, window: DateWindow) -> GraphQLRequest:
    """Slot lookup for one location's primary appointment type over ``window``."""
    capability_id = location.primary_capability_id
    if capability_id is None:
        raise ValueError(f"location {location.id} has no appointment type to query")
    return GraphQLRequest(
        operation="publicGetAvailableTimes",
        query=AVAILABLE_TIMES_QUERY,
        variables={
            "pharmacyId": location.id,
            "appointmentTypeId": capability_id,
            "noOfPeople": PARTY_SIZE,
            "filter": window.as_filter(),
        },
        headers={"x-pharmacyid": location.id},
    )


def _extract(payload: Mapping[str, Any], operation: str) -> tuple[list[Any], bool]:
    """Pull the operation's list out of the envelope.

    Returns ``(items, degraded)``. An empty payload is the timeout fallback.
    """
    if "data" not in payload:
        return [], True
    data = payload["data"] or {}
    items = data.get(operation)
    return list(items or []), False


def parse_pharmacies(payload: Mapping[str, Any]) -> LocationQueryResult:
    items, degraded = _extract(payload, "publicGetEnterprisePharmacies")
    return LocationQueryResult(
        locations=tuple(Location.model_validate(item) for item in items),
        degraded=degraded,
    )


def parse_available_times(payload: Mapping[str, Any]) -> SlotQueryResult:
    items, degraded = _extract(payload, "publicGetAvailableTimes")
    return SlotQueryResult(
        slots=tuple(TimeSlot.model_validate(item) for item in items),
        degraded=degraded,
    )
