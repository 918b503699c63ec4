"""Job listing and control endpoints."""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from pubdatahub.api.responses import Response, error_response, json_response


@dataclass
class JobProgress:
    """How far a job has come."""

    current: int = 0
    total: int = 0
    message: str = ""


@dataclass
class JobInfo:
    """A job as reported by the API."""

    id: str
    type: str
    state: str
    priority: int = 0
    progress: JobProgress = field(default_factory=JobProgress)
    start_time: datetime = field(default_factory=lambda: datetime.now().astimezone())
    end_time: datetime | None = None
    error_message: str = ""
    retry_count: int = 0
    max_retries: int = 0
    created_by: str = ""
    description: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation; empty optional fields are left out."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "state": self.state,
            "priority": self.priority,
            "progress": {
                "current": self.progress.current,
                "total": self.progress.total,
                "message": self.progress.message,
            },
            "start_time": self.start_time.isoformat(),
        }
        if self.end_time is not None:
            data["end_time"] = self.end_time.isoformat()
        if self.error_message:
            data["error_message"] = self.error_message
        data.update(
            retry_count=self.retry_count,
            max_retries=self.max_retries,
            created_by=self.created_by,
            description=self.description,
            metadata=dict(self.metadata),
        )
        return data


class JobManager(Protocol):
    """What the API needs from a job manager."""

    def list_jobs(self) -> Iterable[JobInfo]:
        """Return all known jobs."""

    def pause_job(self, job_id: str) -> None:
        """Pause a running job."""

    def resume_job(self, job_id: str) -> None:
        """Resume a paused job."""


def handle_list_jobs(manager: JobManager) -> Response:
    """GET /api/jobs"""
    try:
        jobs = list(manager.list_jobs())
    except Exception as exc:
        return error_response(f"Failed to list jobs: {exc}", 500)
    return json_response([job.to_dict() for job in jobs])


def handle_start_download(body: bytes | str) -> Response:
    """POST /api/jobs/download: queue a download job for the requested source."""
    try:
        request = json.loads(body)
    except ValueError:
        return error_response("Invalid request body", 400)
    if not isinstance(request, dict):
        return error_response("Invalid request body", 400)
    source = request.get("source")
    if source is None:
        source = ""
    if not isinstance(source, str):
        return error_response("Invalid request body", 400)
    if not source:
        return error_response("Source is required", 400)

    job = JobInfo(
        id=str(uuid.uuid4()),
        type="download",
        state="queued",
        priority=5,
        progress=JobProgress(current=0, total=0, message="Job queued"),
        created_by="api",
        description=f"Download job for {source}",
        metadata={"source": source},
    )
    return json_response(job.to_dict(), 201)


def _job_action(manager: JobManager, path: str, action: str) -> Response:
    parts = path.split("/")
    if len(parts) != 5 or parts[4] != action:
        return error_response("Invalid URL path", 400)
    job_id = parts[3]
    if not job_id:
        return error_response("Job ID is required", 400)

    operation = manager.pause_job if action == "pause" else manager.resume_job
    past = "paused" if action == "pause" else "resumed"
    try:
        operation(job_id)
    except Exception as exc:
        return error_response(f"Failed to {action} job: {exc}", 500)
    return json_response({"message": f"Job {job_id} {past} successfully", "job_id": job_id})


def handle_pause_job(manager: JobManager, path: str) -> Response:
    """POST /api/jobs/{job_id}/pause"""
    return _job_action(manager, path, "pause")


def handle_resume_job(manager: JobManager, path: str) -> Response:
    """POST /api/jobs/{job_id}/resume"""
    return _job_action(manager, path, "resume")