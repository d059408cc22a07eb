"""
Azure DevOps work API client (iterations and iteration capacity).

Synchronous on purpose: the pipeline fetches one iteration at a time.
Nothing is retried; callers decide what a failure means.
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from sprintcap.core.errors import CapacityFetchError, IterationSourceError
from sprintcap.schemas.azure import CapacitySnapshot, Iteration, IterationList

logger = logging.getLogger(__name__)


class AzureDevOpsClient:
    """Reads team iterations and their capacity with a personal access token."""

    def __init__(
        self,
        organization_url: str,
        access_token: str,
        api_version: str = "7.0",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.organization_url = organization_url.rstrip("/")
        self.api_version = api_version
        # PATs go in as Basic auth with an empty user name.
        self._client = httpx.Client(
            auth=httpx.BasicAuth("", access_token),
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> AzureDevOpsClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _url(self, *segments: str) -> str:
        path = "/".join(quote(s, safe="") for s in segments)
        return f"{self.organization_url}/{path}"

    # ------------------------------------------------------------------
    # Iterations
    # ------------------------------------------------------------------

    def list_iterations(
        self,
        project: str,
        team: str,
        timeframe: Optional[str] = None,
    ) -> list[Iteration]:
        """All iterations of the team, in the order the service returns them."""
        params = {"api-version": self.api_version}
        if timeframe:
            params["$timeframe"] = timeframe
        url = self._url(project, team, "_apis", "work", "teamsettings", "iterations")

        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise IterationSourceError(f"Error fetching iterations: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise IterationSourceError(
                f"Error fetching iterations: unexpected status code "
                f"{response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        try:
            iterations = IterationList.model_validate(response.json()).value
        except (ValueError, ValidationError) as exc:
            raise IterationSourceError(f"Error decoding iterations: {exc}") from exc

        logger.info("Fetched %d iterations for %s/%s", len(iterations), project, team)
        return iterations

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------

    def get_iteration_capacity(self, project: str, iteration_id: str) -> CapacitySnapshot:
        """Team-wide capacity per day and days off for one iteration."""
        url = self._url(
            project, "_apis", "work", "iterations", iteration_id, "iterationcapacities"
        )
        try:
            response = self._client.get(url, params={"api-version": self.api_version})
        except httpx.HTTPError as exc:
            raise CapacityFetchError(iteration_id, str(exc)) from exc

        if response.status_code != httpx.codes.OK:
            raise CapacityFetchError(
                iteration_id,
                f"unexpected status code {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        try:
            return CapacitySnapshot.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise CapacityFetchError(iteration_id, f"invalid payload: {exc}") from exc
