"""StuffUSell customer API entry point.

Every method maps to one remote operation and delegates to :class:`HttpClient`.
Authenticated operations install the caller's token for the duration of the
call only, so one ``SusClient`` can serve many customers from many threads.
"""

from __future__ import annotations

import base64
from typing import Any, List, Mapping, Optional
from urllib.parse import quote

from sus_client.clients.base import BaseClient
from sus_client.clients.context import request_context
from sus_client.clients.errors import ClientError
from sus_client.clients.http_client import HttpClient
from sus_client.models import (
    BookCourierRequest,
    CustomerDto,
    CustomerOrderDto,
    CustomerOrderUpdateRequest,
    CustomerUpdateRequest,
    DateListDto,
    InvoiceDto,
    LedgerDto,
    ListingReportDto,
    LoginResponse,
    PackagingRequestDto,
    PageDto,
    PasswordResetRequest,
    PasswordResetRequestRequest,
    PricingChangedResponse,
    PricingDto,
    RegistrationRequest,
    RegistrationResponse,
    SalesTickerResponse,
    StockReportSummaryDto,
    SuccessResponse,
    UserNameAvailableResponse,
)
from sus_client.settings import Configuration, get_settings


class SusClient(BaseClient):
    """Typed facade over the customer API."""

    def __init__(self, configuration: Configuration, *, http_client: Optional[HttpClient] = None) -> None:
        super().__init__("sus", {"endpoint": configuration.endpoint})
        self.configuration = configuration
        self._client = http_client or HttpClient(configuration)

    @classmethod
    def make(
        cls,
        access_token: Optional[str] = None,
        *,
        configuration: Optional[Configuration] = None,
        **overrides: Any,
    ) -> SusClient:
        """Build a client from an explicit configuration or from the environment.

        ``access_token`` and any keyword overrides replace the corresponding
        configuration fields.
        """

        if access_token is not None:
            overrides["access_token"] = access_token
        if configuration is None:
            # Init kwargs take precedence over the environment for the fields they name.
            base = Configuration(**overrides) if overrides else get_settings()
        elif overrides:
            base = Configuration(**{**configuration.model_dump(), **overrides})
        else:
            base = configuration
        return cls(base)

    @property
    def http(self) -> HttpClient:
        return self._client

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SusClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def auth_token(username: str, password: str) -> str:
        """Derive the basic auth token the API expects for a customer."""

        return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")

    # Anonymous operations ----------------------------------------------------------

    def is_username_available(self, username: str) -> UserNameAvailableResponse:
        return self._client.get(
            "/api/customer/username-available",
            {"username": username},
            UserNameAvailableResponse,
        )

    def register(self, request: RegistrationRequest) -> RegistrationResponse:
        return self._client.post("/api/customer/register", request, RegistrationResponse)

    def password_reset_request(self, request: PasswordResetRequestRequest) -> SuccessResponse:
        return self._client.post("/api/customer/password-reset-request", request, SuccessResponse)

    def password_reset(self, request: PasswordResetRequest) -> CustomerDto:
        return self._client.post("/api/customer/password-reset", request, CustomerDto)

    def sales_ticker(self) -> SalesTickerResponse:
        return self._client.get("/api/customer/sales-ticker", None, SalesTickerResponse)

    def categories(self) -> List[str]:
        return self._client.get("/api/customer/categories", None, List[str])

    def available_shipping_dates(self) -> DateListDto:
        return self._client.get("/api/customer/shipping-dates", None, DateListDto)

    # Customer operations -----------------------------------------------------------

    def login(self, username: str, password: str) -> LoginResponse:
        """Check credentials and return the token to use on later calls."""

        token = self.auth_token(username, password)
        with request_context(token):
            customer = self._client.get("/api/customer/login", None, CustomerDto)
        self._log("Customer logged in", username=username)
        return LoginResponse(auth_token=token, customer=customer)

    def current(self, auth_token: str) -> CustomerDto:
        with request_context(auth_token):
            return self._client.get("/api/customer/current", None, CustomerDto)

    def pricing(self, auth_token: str) -> PricingDto:
        with request_context(auth_token):
            return self._client.get("/api/customer/pricing", None, PricingDto)

    def update(self, auth_token: str, request: CustomerUpdateRequest) -> LoginResponse:
        """Update the customer and return a token matching the new credentials."""

        with request_context(auth_token):
            customer: Optional[CustomerDto] = self._client.post("/api/customer/update", request, CustomerDto)
        if customer is None or not customer.primary_email:
            raise ClientError("Update returned no customer email to derive a new auth token from")
        password = request.new_password or request.current_password
        return LoginResponse(auth_token=self.auth_token(customer.primary_email, password), customer=customer)

    def pricing_changed(self, auth_token: str) -> PricingChangedResponse:
        with request_context(auth_token):
            return self._client.post("/api/customer/pricing-changed", {}, PricingChangedResponse)

    def new_order(self, auth_token: str, tcs_accepted: bool, ip_address: str) -> CustomerOrderDto:
        # The IP address records acceptance of the terms; it is blanked when they were not accepted.
        with request_context(auth_token):
            return self._client.post(
                "/api/customer/new-order",
                {"ipAddress": ip_address if tcs_accepted else ""},
                CustomerOrderDto,
            )

    def orders(self, auth_token: str) -> List[CustomerOrderDto]:
        with request_context(auth_token):
            return self._client.get("/api/customer/orders", None, List[CustomerOrderDto])

    def get_order(self, auth_token: str, sku: str) -> CustomerOrderDto:
        with request_context(auth_token):
            return self._client.get(_order_path(sku), None, CustomerOrderDto)

    def update_order(self, auth_token: str, sku: str, request: CustomerOrderUpdateRequest) -> SuccessResponse:
        with request_context(auth_token):
            return self._client.post(_order_path(sku, "update"), request, SuccessResponse)

    def collect_plus_label_numbers(self, auth_token: str, sku: str) -> List[str]:
        with request_context(auth_token):
            return self._client.get(_order_path(sku, "collect-plus-label-numbers"), None, List[str])

    def book_courier(self, auth_token: str, sku: str, request: BookCourierRequest) -> SuccessResponse:
        with request_context(auth_token):
            return self._client.post(_order_path(sku, "book-courier"), request, SuccessResponse)

    def packaging_requests(self, auth_token: str, sku: str) -> List[PackagingRequestDto]:
        with request_context(auth_token):
            return self._client.get(_order_path(sku, "packaging-request"), None, List[PackagingRequestDto])

    def update_packaging_requests(self, auth_token: str, sku: str, counts: Mapping[str, int]) -> SuccessResponse:
        with request_context(auth_token):
            return self._client.post(_order_path(sku, "packaging-request"), dict(counts), SuccessResponse)

    def request_payment(self, auth_token: str) -> SuccessResponse:
        with request_context(auth_token):
            return self._client.post("/api/customer/customer-payment-request", {}, SuccessResponse)

    def listing_history(self, auth_token: str, sku: str) -> List[ListingReportDto]:
        with request_context(auth_token):
            return self._client.get(_order_path(sku, "listing-history"), None, List[ListingReportDto])

    def stock_report_summary(self, auth_token: str) -> StockReportSummaryDto:
        with request_context(auth_token):
            return self._client.get("/api/stock/summary", None, StockReportSummaryDto)

    def stock_data(self, auth_token: str, sku: str) -> ListingReportDto:
        with request_context(auth_token):
            return self._client.get(f"/api/sku/{_segment(sku)}", None, ListingReportDto)

    def account_ledger(self, auth_token: str) -> LedgerDto:
        with request_context(auth_token):
            return self._client.get("/api/customer/ledger", None, LedgerDto)

    def invoices(self, auth_token: str, page: int, page_size: int) -> PageDto[InvoiceDto]:
        with request_context(auth_token):
            return self._client.get(
                "/api/customer/invoices",
                {"page": page, "pageSize": page_size},
                PageDto[InvoiceDto],
            )

    def invoice(self, auth_token: str, invoice_number: str) -> LedgerDto:
        with request_context(auth_token):
            return self._client.get(f"/api/customer/invoice/{_segment(invoice_number)}", None, LedgerDto)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _order_path(sku: str, action: Optional[str] = None) -> str:
    path = f"/api/customer/order/{_segment(sku)}"
    return f"{path}/{action}" if action else path
