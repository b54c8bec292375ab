"""
Pydantic schemas for the vendor / purchase request intake form.
"""
import enum
from datetime import date, timedelta
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class CompanyName(str, enum.Enum):
    """Organizations a request can be raised for."""

    NEWREZ = "Newrez"
    RITHM = "Rithm"
    GENESIS = "Genesis"
    SLS = "SLS"


class VendorSelection(str, enum.Enum):
    """Whether the line of business already picked a vendor."""

    SELECTED = "selected"
    NEEDS_SELECTION = "needsSelection"


VENDOR_SELECTION_LABELS = {
    VendorSelection.SELECTED: "LOB has selected a Vendor",
    VendorSelection.NEEDS_SELECTION: "LOB Requires Procurement to select a Vendor",
}

COMPANY_NAMES = tuple(c.value for c in CompanyName)
VENDOR_SELECTIONS = tuple(v.value for v in VendorSelection)


def earliest_completion_date(today: Optional[date] = None) -> date:
    """First date accepted for completionDate: the day after tomorrow."""
    today = today or date.today()
    return today + timedelta(days=2)


class RequestRecordCreate(BaseModel):
    """Request body for submitting a vendor / purchase request."""

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "requestorName": "Jane Doe",
                "department": "Facilities",
                "companyName": "Newrez",
                "email": "jane.doe@example.com",
                "contactPhone": "555-0100",
                "description": "Quarterly HVAC maintenance contract",
                "vendorSelection": "needsSelection",
                "completionDate": "2026-12-01",
            }
        },
    )

    requestor_name: str = Field(..., alias="requestorName", min_length=1, max_length=255)
    department: str = Field(..., min_length=1, max_length=255)
    company_name: CompanyName = Field(..., alias="companyName")
    email: EmailStr = Field(..., description="Email address")
    contact_phone: str = Field(..., alias="contactPhone", min_length=1, max_length=50)
    description: str = Field(..., min_length=1, description="Goods or services being requested")
    vendor_selection: VendorSelection = Field(..., alias="vendorSelection")
    completion_date: Optional[date] = Field(None, alias="completionDate")

    @field_validator("completion_date")
    @classmethod
    def completion_date_after_tomorrow(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value < earliest_completion_date():
            raise ValueError("completionDate must be later than tomorrow")
        return value

    def to_document(self) -> Dict[str, Any]:
        """Wire-shaped document (camelCase keys, ISO date) for persistence."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SubmitResponse(BaseModel):
    """Response after a request is stored."""

    message: str = "Request submitted successfully"
    id: str = Field(..., description="Identifier generated by the document store")


class MessageResponse(BaseModel):
    """Error body for rejected or failed submissions."""

    message: str
