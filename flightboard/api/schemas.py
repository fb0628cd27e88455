"""
Request validation for flight create/update payloads.

Field names on the wire are camelCase. All timestamps are normalized to
UTC here (naive values are taken to be UTC already), so the services
only ever see aware UTC datetimes.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from flightboard.exceptions import FlightValidationError
from flightboard.services.flight_store import FlightDraft


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class FlightDraftRequest(BaseModel):
    """Body of POST /api/flights and PUT /api/flights/<id>."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    flight_number: str = Field(..., alias='flightNumber', min_length=1, max_length=16)
    destination: str = Field(..., min_length=1, max_length=64)
    gate: str = Field(..., min_length=1, max_length=16)
    scheduled_time: datetime = Field(..., alias='scheduledTime')
    airline: str = Field('Generic', min_length=1, max_length=64)
    origin: str = Field('TLV', min_length=1, max_length=64)
    is_arrival: bool = Field(False, alias='isArrival')
    estimated_time: Optional[datetime] = Field(None, alias='estimatedTime')
    remarks: Optional[str] = Field(None, max_length=255)

    @field_validator('scheduled_time')
    @classmethod
    def scheduled_in_future(cls, value: datetime, info: ValidationInfo) -> datetime:
        value = to_utc(value)
        # Tests pin "now" through the validation context
        now = (info.context or {}).get('now') or datetime.now(timezone.utc)
        if value <= to_utc(now):
            raise ValueError('ScheduledTime must be in the future')
        return value

    @field_validator('estimated_time')
    @classmethod
    def estimated_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)

    def to_draft(self) -> FlightDraft:
        return FlightDraft(
            flight_number=self.flight_number,
            destination=self.destination,
            gate=self.gate,
            scheduled_time=self.scheduled_time,
            airline=self.airline,
            origin=self.origin,
            is_arrival=self.is_arrival,
            estimated_time=self.estimated_time,
            remarks=self.remarks,
        )


def _collect_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Group pydantic errors by top-level field name."""
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        field = str(err['loc'][0]) if err['loc'] else 'body'
        errors.setdefault(field, []).append(err['msg'])
    return errors


def parse_flight_draft(data: Any, now: Optional[datetime] = None) -> FlightDraft:
    """
    Validate a decoded JSON body into a FlightDraft.

    Raises FlightValidationError with per-field messages on failure.
    """
    if not isinstance(data, dict):
        raise FlightValidationError({'body': ['Expected a JSON object']})

    try:
        request_model = FlightDraftRequest.model_validate(data, context={'now': now})
    except ValidationError as e:
        raise FlightValidationError(_collect_errors(e)) from e

    return request_model.to_draft()
