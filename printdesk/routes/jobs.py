"""Job routes for printdesk - public upload and status, operator queue."""

import logging

from flask import Blueprint, jsonify, request, send_file

from ..auth import operator_required
from ..errors import StoredFileMissingError
from ..models import User
from ..services import lifecycle
from ..services.intake import submit_job_files

logger = logging.getLogger(__name__)

jobs_bp = Blueprint("jobs", __name__, url_prefix="/api")


@jobs_bp.post("/upload")
def upload():
    """Accept one or more documents with shared print options.
    
    Form fields:
        files / files[]: The documents to print.
        displayName: Name shown on the operator queue.
        copies: Number of copies (default: 1).
        isColor: "true" for color printing.
        pageRange: Optional free-text page selection.
    
    Returns:
        201 with a JSON list of the created jobs.
    """
    files = request.files.getlist("files") + request.files.getlist("files[]")
    jobs = submit_job_files(files, request.form)
    return jsonify([job.to_public_dict() for job in jobs]), 201


@jobs_bp.get("/jobs/<int:job_id>")
def get_job(job_id: int):
    """Public confirmation view of a single job."""
    job = lifecycle.get_job(job_id)
    return jsonify(job.to_public_dict())


@jobs_bp.get("/admin/jobs")
@operator_required
def list_jobs(operator: User):
    """The operator queue, pending jobs first."""
    jobs = lifecycle.list_jobs(operator)
    return jsonify([job.to_dict() for job in jobs])


@jobs_bp.patch("/admin/jobs/<int:job_id>/status")
@operator_required
def update_job_status(job_id: int, operator: User):
    """Advance a job to the requested status.
    
    Body:
        {"status": "PRINTING" | "COMPLETED"}
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    job = lifecycle.update_status(operator, job_id, payload.get("status"))
    return jsonify(job.to_dict())


@jobs_bp.get("/admin/jobs/<int:job_id>/download")
@operator_required
def download_job_file(job_id: int, operator: User):
    """Send a job's file, inline when ?inline=true and the type is viewable."""
    inline = request.args.get("inline", "").lower() == "true"
    target = lifecycle.prepare_download(operator, job_id, inline=inline)
    
    try:
        response = send_file(
            target.path,
            mimetype=target.mimetype,
            as_attachment=target.as_attachment,
            download_name=target.filename,
        )
    except FileNotFoundError:
        # Swept between the existence check and the open
        logger.warning(f"Stored file for job {job_id} disappeared during download")
        raise StoredFileMissingError(job_id) from None
    
    # Submitted content must not run script in this origin
    response.headers["Content-Security-Policy"] = "sandbox"
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response
