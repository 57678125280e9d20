"""Async job store over DuckDB; every call is a single atomic statement."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

import duckdb

from jobboard.db import get_connection
from jobboard.errors import JobStoreError
from jobboard.models.job import Job, JobDraft

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id",
    "publisher_id",
    "title",
    "specialisation",
    "description",
    "role_type",
    "salary",
    "application_deadline",
    "application_link",
    "uses_embedded_form",
    "date_posted",
)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _row_to_job(row: tuple) -> Job:
    return Job.model_validate(dict(zip(_COLUMNS, row)))


class JobStore:
    def __init__(self, connect: Callable[[], duckdb.DuckDBPyConnection] = get_connection) -> None:
        self._connect = connect

    def _cursor(self) -> duckdb.DuckDBPyConnection:
        # One cursor per call: the shared connection is not safe across threads.
        return self._connect().cursor()

    def _insert(self, job: Job) -> None:
        cur = self._cursor()
        try:
            cur.execute(
                f"INSERT INTO jobs ({', '.join(_COLUMNS)}) VALUES ({', '.join('?' * len(_COLUMNS))})",
                [
                    job.id,
                    job.publisher_id,
                    job.title,
                    job.specialisation.value,
                    job.description,
                    job.role_type.value,
                    job.salary,
                    _naive_utc(job.application_deadline),
                    job.application_link,
                    job.uses_embedded_form,
                    _naive_utc(job.date_posted),
                ],
            )
        finally:
            cur.close()

    def _delete(self, job_id: str) -> bool:
        cur = self._cursor()
        try:
            deleted = cur.execute("DELETE FROM jobs WHERE id = ? RETURNING id", [job_id]).fetchall()
        finally:
            cur.close()
        return bool(deleted)

    def _select(self, where: str = "", params: list | None = None) -> list[Job]:
        cur = self._cursor()
        try:
            rows = cur.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM jobs {where} ORDER BY date_posted DESC",
                params or [],
            ).fetchall()
        finally:
            cur.close()
        return [_row_to_job(row) for row in rows]

    async def create(
        self, draft: JobDraft, publisher_id: str, uses_embedded_form: bool = False
    ) -> Job:
        job = Job(
            id=uuid.uuid4().hex,
            publisher_id=publisher_id,
            title=draft.title,
            specialisation=draft.specialisation,
            description=draft.description,
            role_type=draft.role_type,
            salary=draft.display_salary,
            application_deadline=_naive_utc(draft.application_deadline),
            application_link=draft.application_link,
            uses_embedded_form=uses_embedded_form,
        )
        try:
            await asyncio.to_thread(self._insert, job)
        except duckdb.Error as e:
            raise JobStoreError(f"Failed to create job '{draft.title}': {e}") from e
        logger.info("Created job %s (%s) for publisher %s", job.id, job.title, publisher_id)
        return job

    async def delete(self, job_id: str) -> None:
        try:
            deleted = await asyncio.to_thread(self._delete, job_id)
        except duckdb.Error as e:
            raise JobStoreError(f"Failed to delete job {job_id}: {e}") from e
        if not deleted:
            raise JobStoreError(f"Job {job_id} not found")
        logger.info("Deleted job %s", job_id)

    async def get(self, job_id: str) -> Job | None:
        try:
            jobs = await asyncio.to_thread(self._select, "WHERE id = ?", [job_id])
        except duckdb.Error as e:
            raise JobStoreError(f"Failed to load job {job_id}: {e}") from e
        return jobs[0] if jobs else None

    async def list_jobs(self, publisher_id: str | None = None) -> list[Job]:
        try:
            if publisher_id:
                return await asyncio.to_thread(self._select, "WHERE publisher_id = ?", [publisher_id])
            return await asyncio.to_thread(self._select)
        except duckdb.Error as e:
            raise JobStoreError(f"Failed to list jobs: {e}") from e


job_store = JobStore()
