"""
DP Travels Backend - Pydantic Models
Data model definitions
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date


# ============================================================
# Catalog Models
# ============================================================

class CabOption(BaseModel):
    """One vehicle class offered for a destination"""
    cab: str
    price: int = Field(gt=0)
    price_label: str = Field(alias="priceLabel")
    option_label: str = Field(alias="optionLabel")

    class Config:
        populate_by_name = True


class DestinationEntry(BaseModel):
    """Static destination record: description plus per-cab prices"""
    name: str
    description: str
    cab_prices: Dict[str, int] = Field(alias="cabPrices")

    class Config:
        populate_by_name = True
        frozen = True


class DestinationResponse(BaseModel):
    """Destination as served to the booking form"""
    name: str
    description: str
    cab_prices: Dict[str, int] = Field(alias="cabPrices")
    cabs: List[CabOption]

    class Config:
        populate_by_name = True


class CatalogResponse(BaseModel):
    destinations: List[DestinationResponse]


# ============================================================
# Validated Request Models
# ============================================================

class ContactQuery(BaseModel):
    """Contact form submission after validation"""
    name: str
    email: str
    phone: str
    message: str


class BookingRequest(BaseModel):
    """Booking form submission after validation"""
    name: str
    email: str
    phone: str
    destination: str
    cab: str
    travellers: int = Field(gt=0)
    booking_date: date = Field(alias="bookingDate")
    message: Optional[str] = None

    class Config:
        populate_by_name = True


class DestinationBookingRequest(BaseModel):
    """
    Destination page submission after validation.
    Wire fields: Name, Email, Ctno, nofTravellers, veh.
    """
    destination: str
    name: str = Field(alias="Name")
    email: str = Field(alias="Email")
    phone: str = Field(alias="Ctno")
    travellers: int = Field(gt=0, alias="nofTravellers")
    cab: str = Field(alias="veh")
    message: Optional[str] = None

    class Config:
        populate_by_name = True


# ============================================================
# Email Models
# ============================================================

class EmailContent(BaseModel):
    """Composed subject and body, not yet addressed"""
    subject: str
    html_body: str
    from_name: str
    reply_to: Optional[str] = None


class Notification(BaseModel):
    """Addressed email handed to a mail provider"""
    from_address: str
    from_name: str
    to_address: str
    subject: str
    html_body: str
    reply_to: Optional[str] = None

    @property
    def from_header(self) -> str:
        return f'"{self.from_name}" <{self.from_address}>'


# ============================================================
# Response Models
# ============================================================

class SubmissionResponse(BaseModel):
    """JSON contract shared by every form endpoint"""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None
    missing: Optional[List[str]] = None
