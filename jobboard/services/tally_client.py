"""Thin async client for the Tally forms API."""

from __future__ import annotations

import logging

import httpx

from jobboard.config import settings
from jobboard.errors import FormServiceError
from jobboard.models.tally import FormSubmission

logger = logging.getLogger(__name__)


class TallyClient:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.tally_api_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.tally_api_key
        self._timeout = timeout or settings.tally_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )

    async def create_form(self, job_id: str, submission: FormSubmission) -> str:
        """Create the application form and return Tally's form id.

        ``job_id`` only labels log lines and error messages; Tally receives
        nothing but the submission's name, status and blocks. Any transport
        error, timeout or rejection raises FormServiceError.
        """
        try:
            async with self._client() as client:
                response = await client.post("/forms", json=submission.to_wire())
        except httpx.TimeoutException as e:
            raise FormServiceError(f"Tally timed out creating form for job {job_id}: {e}") from e
        except httpx.HTTPError as e:
            raise FormServiceError(f"Tally request failed for job {job_id}: {e}") from e

        if response.is_error:
            logger.error(
                "Tally rejected form for job %s: %d %s",
                job_id,
                response.status_code,
                response.text[:500],
            )
            raise FormServiceError(
                f"Tally rejected form for job {job_id} with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise FormServiceError(
                f"Tally returned a non-JSON response for job {job_id}",
                status_code=response.status_code,
            ) from e
        form_id = data.get("id") if isinstance(data, dict) else None
        if not form_id:
            raise FormServiceError(
                f"Tally response for job {job_id} has no form id",
                status_code=response.status_code,
            )

        logger.info("Created Tally form %s for job %s (%d blocks)", form_id, job_id, len(submission.blocks))
        return str(form_id)


tally_client = TallyClient()
