"""Async httpx client for the loan-origination (LOS) and data-engine APIs."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cardscore.config import settings
from cardscore.integrations.los.mapping import normalize_api_data

logger = logging.getLogger(__name__)


class LosClient:
    """Thin async wrapper around the LOS application, CBS and DBR endpoints.

    Endpoints:
        GET  {los_api_base_url}/api/applications/{id}
        GET  {los_api_base_url}/api/cbs/{id}
        POST {data_engine_url}/api/dbr   body {"losId": id, "loan_type": ...}

    Every fetch fails soft: timeouts, HTTP errors and transport errors are
    logged and return None so the caller can fall back.
    """

    def __init__(self) -> None:
        self._base_url = settings.los.los_api_base_url.rstrip("/")
        self._engine_url = settings.los.data_engine_url.rstrip("/")
        self._timeout = httpx.Timeout(settings.los.los_timeout, connect=settings.los.los_connect_timeout)

    async def _request(self, method: str, url: str, what: str, **kwargs: Any) -> dict[str, Any] | None:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                payload = response.json()

        except httpx.TimeoutException:
            logger.warning("LOS %s timeout: %s", what, url)
            return None

        except httpx.HTTPStatusError as exc:
            logger.warning("LOS %s HTTP error %s: %s", what, exc.response.status_code, url)
            return None

        except httpx.RequestError as exc:
            logger.warning("LOS %s request failed (%s): %s", what, type(exc).__name__, url)
            return None

        except ValueError:
            logger.warning("LOS %s returned a non-JSON body: %s", what, url)
            return None

        if not isinstance(payload, dict):
            logger.warning("LOS %s returned %s, expected an object", what, type(payload).__name__)
            return None
        return normalize_api_data(payload)

    async def fetch_application(self, application_id: int | str) -> dict[str, Any] | None:
        """Application payload with JSON nulls normalized to False, or None."""
        return await self._request("GET", f"{self._base_url}/api/applications/{application_id}", "application")

    async def fetch_cbs(self, application_id: int | str) -> dict[str, Any] | None:
        """CBS summary payload (external scores, exposures), or None."""
        return await self._request("GET", f"{self._base_url}/api/cbs/{application_id}", "cbs")

    async def fetch_dbr(self, application_id: int | str, loan_type: str | None) -> dict[str, Any] | None:
        """Precomputed DBR from the data engine, or None."""
        return await self._request(
            "POST",
            f"{self._engine_url}/api/dbr",
            "dbr",
            json={"losId": application_id, "loan_type": loan_type},
        )
