"""Request executor: the single choke point every remote call passes through."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, Optional

import orjson
import requests
from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError
from requests.adapters import HTTPAdapter

from sus_client.clients.base import BaseClient
from sus_client.clients.context import RequestContext
from sus_client.clients.errors import (
    HTTP_BAD_REQUEST,
    HTTP_OK,
    ClientError,
    ServerError,
    TransportError,
    server_error,
)
from sus_client.clients.rate_limiter import RateLimiter
from sus_client.models import ErrorResponse
from sus_client.settings import Configuration

HEADER_ACCESS_TOKEN = "X-Access-Token"
HEADER_AUTH = "Authorization"
HEADER_USER_AGENT = "User-Agent"
HEADER_FORWARDED_FOR = "X-Forwarded-For"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"
CHUNK_SIZE = 8192


class HttpClient(BaseClient):
    """Builds, throttles, sends and decodes JSON requests for one configuration.

    One pooled ``requests.Session`` is created per instance and shared by every
    thread calling it. Identity comes from ``context`` when given, otherwise
    from the calling thread's :class:`RequestContext`.
    """

    def __init__(
        self,
        configuration: Configuration,
        *,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        super().__init__("sus_http", {"endpoint": configuration.endpoint})
        self._configuration = configuration
        self._session = session or _make_session(configuration)
        self._rate_limiter = rate_limiter or RateLimiter(
            configuration.requests_per_second,
            configuration.request_burst_size,
        )

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        response_type: Any = None,
        *,
        context: Optional[RequestContext] = None,
    ) -> Any:
        request = requests.Request("GET", self._url(path), params=_query(params))
        return self._execute_and_decode(request, response_type, context)

    def post(
        self,
        path: str,
        payload: Any = None,
        response_type: Any = None,
        *,
        context: Optional[RequestContext] = None,
    ) -> Any:
        request = requests.Request("POST", self._url(path))
        if payload is not None:
            request.data = _serialize(payload)
            request.headers["Content-Type"] = JSON_CONTENT_TYPE
        return self._execute_and_decode(request, response_type, context)

    def delete(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        response_type: Any = None,
        *,
        context: Optional[RequestContext] = None,
    ) -> Any:
        request = requests.Request("DELETE", self._url(path), params=_query(params))
        return self._execute_and_decode(request, response_type, context)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Execution ---------------------------------------------------------------------

    def _execute_and_decode(
        self,
        request: requests.Request,
        response_type: Any,
        context: Optional[RequestContext],
    ) -> Any:
        content = self._execute(request, context)
        if not content:
            return None
        try:
            return _decode(content, response_type)
        except (orjson.JSONDecodeError, ValidationError) as exc:
            raise _recover_error(content, exc) from exc

    def _execute(self, request: requests.Request, context: Optional[RequestContext]) -> Optional[bytes]:
        if self._configuration.block_till_rate_limit_reset:
            self._rate_limiter.block_till_rate_limit_reset()

        request.headers.update(self._headers(context or RequestContext.current()))
        prepared = self._session.prepare_request(request)
        try:
            response = self._session.send(prepared, stream=True, timeout=self._configuration.timeout)
        except requests.RequestException as exc:
            logger.exception("Request to SUS API failed", method=prepared.method, url=prepared.url)
            raise TransportError(f"{prepared.method} {prepared.url} failed: {exc}") from exc

        with response:
            if response.status_code >= HTTP_BAD_REQUEST:
                raise self._classify(response)
            content = _read_body(response)
        self._log("Executed request", method=prepared.method, url=prepared.url, status=response.status_code)
        return content

    def _headers(self, context: RequestContext) -> dict[str, str]:
        headers = {
            HEADER_ACCESS_TOKEN: self._configuration.access_token,
            HEADER_USER_AGENT: context.user_agent or self._configuration.user_agent,
            "Accept": "application/json",
        }
        if context.auth_token:
            headers[HEADER_AUTH] = f"Basic {context.auth_token}"
        if context.ip_address:
            headers[HEADER_FORWARDED_FOR] = context.ip_address
        return headers

    def _classify(self, response: requests.Response) -> ServerError:
        error: Optional[ErrorResponse] = None
        content_type = response.headers.get("Content-Type", "")
        if content_type.startswith("application/json"):
            content = b""
            try:
                content = response.content
                error = ErrorResponse.model_validate_json(content)
            except (requests.RequestException, ValidationError):
                error = ErrorResponse(error=content.decode("utf-8", errors="replace"))
        exc = server_error(response.status_code, response.reason or "", error)
        self._log(
            "SUS API request rejected",
            level="WARNING",
            url=response.url,
            status=response.status_code,
            kind=exc.kind.value,
        )
        return exc

    def _url(self, path: str) -> str:
        return f"{self._configuration.endpoint}/{path.lstrip('/')}"


def _make_session(configuration: Configuration) -> requests.Session:
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_maxsize=configuration.max_connections_per_route,
        pool_block=True,
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _query(params: Optional[Mapping[str, Any]]) -> Optional[dict[str, str]]:
    if not params:
        return None
    return {str(key): str(value) for key, value in params.items() if value is not None}


def _read_body(response: requests.Response) -> Optional[bytes]:
    chunks: list[bytes] = []
    try:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            chunks.append(chunk)
    except requests.RequestException as exc:
        logger.exception("Response body read aborted", url=response.url, received=sum(map(len, chunks)))
        raise _recover_error(b"".join(chunks), exc) from exc
    content = b"".join(chunks)
    return content or None


def _recover_error(content: bytes, cause: Exception) -> ClientError:
    """Interpret an undecodable body as an error payload, else surface the cause."""

    try:
        error = ErrorResponse.model_validate_json(content)
    except ValidationError:
        if isinstance(cause, requests.RequestException):
            return TransportError(f"Response body read failed: {cause}")
        return ClientError(f"Unable to decode response: {cause}")
    return ServerError(HTTP_OK, "OK", error)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


def _serialize(payload: Any) -> bytes:
    try:
        return orjson.dumps(payload, default=_to_jsonable)
    except TypeError as exc:
        raise ClientError(f"Unable to serialize request payload: {exc}") from exc


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def _decode(content: bytes, response_type: Any) -> Any:
    if response_type is None:
        return orjson.loads(content)
    return _adapter(response_type).validate_json(content)
