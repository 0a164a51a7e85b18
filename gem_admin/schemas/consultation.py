from pydantic import BaseModel, field_validator

from gem_admin.services.status import ConsultationStatus, parse_status


class ConsultationStatusUpdate(BaseModel):
    status: ConsultationStatus

    @field_validator("status", mode="before")
    @classmethod
    def _any_case(cls, v):
        return parse_status(ConsultationStatus, v) if isinstance(v, str) else v
