# src/hyperunit/client/http.py
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from hyperunit.config import HyperUnitConfig
from hyperunit.core.models import ApiResponse
from hyperunit.exceptions import ApiError, NetworkError, RequestTimeout, ResponseFormatError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class HyperUnitClient:
    """
    Thin JSON-over-HTTP client for the HyperUnit API.

    Every failure is raised as a HyperUnitError subclass:

      * ApiError            — the server answered with a non-2xx status;
      * RequestTimeout      — the request timed out;
      * NetworkError        — no response was received at all;
      * ResponseFormatError — a 2xx body that is not JSON of the expected shape.
    """

    def __init__(
        self,
        config: Optional[HyperUnitConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = (config or HyperUnitConfig()).resolve()
        self._http = httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            headers={"Content-Type": "application/json", **self.config.headers},
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "HyperUnitClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get(
        self,
        url: str,
        model: Type[M],
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse[M]:
        """
        GET `url` and decode the JSON body into `model`.
        """
        try:
            response = self._http.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise RequestTimeout(f"Request timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Network error: No response received ({exc})") from exc

        logger.debug("GET %s -> %d", response.request.url, response.status_code)

        if response.is_error:
            raise self._api_error(response)

        try:
            data = model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ResponseFormatError(
                f"Unexpected response body for {url}: {exc}",
                status=response.status_code,
                details=response.text,
            ) from exc

        return ApiResponse[model](
            data=data,
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
        )

    @staticmethod
    def _api_error(response: httpx.Response) -> ApiError:
        body: Any
        try:
            body = response.json()
        except ValueError:
            body = response.text
        message = "API request failed"
        code = None
        if isinstance(body, dict):
            message = body.get("error") or message
            code = body.get("code")
        logger.info("API error %d: %s", response.status_code, message)
        return ApiError(message, status=response.status_code, code=code, details=body)
