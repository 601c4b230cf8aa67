"""Pydantic models for the upstream payloads and the records we report."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PharmacyAddress(_Frozen):
    """Street address of a store. Only ``city`` is relied upon; it may be missing."""

    unit: Optional[str] = None
    street_number: Optional[str] = Field(default=None, alias="streetNumber")
    street_name: Optional[str] = Field(default=None, alias="streetName")
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    longitude: Optional[float] = None
    latitude: Optional[float] = None


class PharmacyContact(_Frozen):
    phone: Optional[str] = None
    email: Optional[str] = None


class AppointmentTypeRef(_Frozen):
    """A store's handle on one appointment type."""

    id: int
    is_waitlisted: Optional[bool] = Field(default=None, alias="isWaitlisted")

    @property
    def waitlisted(self) -> bool:
        return bool(self.is_waitlisted)


class Location(_Frozen):
    """A physical pharmacy offering the appointment type being checked."""

    id: str
    name: str
    store_number: str = Field(alias="storeNo")
    address: PharmacyAddress = Field(alias="pharmacyAddress")
    contact: Optional[PharmacyContact] = Field(default=None, alias="pharmacyContact")
    appointment_types: Tuple[AppointmentTypeRef, ...] = Field(
        default_factory=tuple, alias="appointmentTypes"
    )

    @property
    def city(self) -> Optional[str]:
        return self.address.city

    @property
    def primary_capability(self) -> Optional[AppointmentTypeRef]:
        # The lookup is scoped to one appointment type, so the first entry is it.
        return self.appointment_types[0] if self.appointment_types else None

    @property
    def primary_capability_id(self) -> Optional[int]:
        capability = self.primary_capability
        return capability.id if capability else None


class TimeSlot(_Frozen):
    """One open slot exactly as the upstream returns it."""

    start_date_time: str = Field(alias="startDateTime")
    end_date_time: str = Field(alias="endDateTime")


class LocationQueryResult(_Frozen):
    """Parsed location lookup. ``degraded`` marks a timed out request."""

    locations: Tuple[Location, ...] = ()
    degraded: bool = False


class SlotQueryResult(_Frozen):
    """Parsed slot lookup. ``degraded`` marks a timed out request."""

    slots: Tuple[TimeSlot, ...] = ()
    degraded: bool = False


class AppointmentRecord(_Frozen):
    """A bookable appointment at a location, ready to be reported."""

    location: Location
    category_label: str
    slot: TimeSlot
    booking_url: str

    @property
    def name(self) -> str:
        return self.location.name

    @property
    def city(self) -> Optional[str]:
        return self.location.city

    @property
    def date(self) -> str:
        return self.slot.start_date_time[0:10]

    @property
    def start_time(self) -> str:
        return self.slot.start_date_time[11:16]

    @property
    def end_time(self) -> str:
        return self.slot.end_date_time[11:16]

    @property
    def time(self) -> str:
        return f"{self.date} {self.start_time} - {self.end_time}"

    @property
    def website(self) -> str:
        return booking_website(
            self.booking_url,
            self.location.store_number,
            self.location.primary_capability_id,
        )


def booking_website(booking_url: str, store_number: str, capability_id: Optional[int]) -> str:
    """Booking page for a store and appointment type."""
    base = f"{booking_url.rstrip('/')}/{store_number}"
    if capability_id is None:
        return base
    return f"{base}/schedule/{capability_id}"
