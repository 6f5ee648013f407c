"""Payload shapes exchanged with the StuffUSell customer API.

The request executor treats these as opaque JSON documents; they only exist so
endpoint methods can hand callers typed values. Field names follow Python
conventions and map to the camelCase wire names through aliases. Unknown
fields are kept so a newer server never breaks an older client.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for every wire payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class ErrorResponse(ApiModel):
    """Error body returned alongside a JSON failure response."""

    error: str


class SuccessResponse(ApiModel):
    success: bool = True


class UserNameAvailableResponse(ApiModel):
    available: bool


class CustomerDto(ApiModel):
    id: Optional[int] = None
    username: Optional[str] = None
    primary_email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LoginResponse(ApiModel):
    """Built client-side: the derived basic auth token plus the customer record."""

    auth_token: str
    customer: Optional[CustomerDto] = None


class RegistrationRequest(ApiModel):
    username: str
    password: str
    primary_email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class RegistrationResponse(ApiModel):
    customer: Optional[CustomerDto] = None


class PasswordResetRequestRequest(ApiModel):
    username: str


class PasswordResetRequest(ApiModel):
    token: str
    password: str


class CustomerUpdateRequest(ApiModel):
    current_password: str
    new_password: Optional[str] = None
    primary_email: Optional[str] = None


class SalesTickerResponse(ApiModel):
    pass


class DateListDto(ApiModel):
    dates: List[date] = Field(default_factory=list)


class PricingDto(ApiModel):
    pass


class PricingChangedResponse(ApiModel):
    changed: bool = False


class CustomerOrderDto(ApiModel):
    sku: Optional[str] = None
    status: Optional[str] = None


class CustomerOrderUpdateRequest(ApiModel):
    pass


class BookCourierRequest(ApiModel):
    collection_date: Optional[date] = None


class PackagingRequestDto(ApiModel):
    packaging_type: Optional[str] = None
    quantity: int = 0


class ListingReportDto(ApiModel):
    sku: Optional[str] = None


class StockReportSummaryDto(ApiModel):
    pass


class LedgerDto(ApiModel):
    entries: List[Any] = Field(default_factory=list)


class InvoiceDto(ApiModel):
    invoice_number: Optional[str] = None


class PageDto(ApiModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    page: int = 0
    page_size: int = 0
    total: Optional[int] = None
