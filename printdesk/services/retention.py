"""Retention sweeper that removes uploaded files once they are no longer needed."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime

from flask import Flask, current_app

from ..models import JobStatus, db, utcnow
from ..storage import delete_stored_file
from ..store import job_store

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Outcome of one sweep cycle."""
    
    deleted: int = 0    # files removed from disk
    expired: int = 0    # jobs moved to EXPIRED
    failed: int = 0     # jobs that raised during the sweep


class RetentionSweeper:
    """Service for expiring uploaded files.
    
    A background thread runs a sweep every SWEEP_INTERVAL_MINUTES. Files of
    COMPLETED jobs are deleted; files of any other job older than
    RETENTION_MAX_AGE_MINUTES are deleted and the job is marked EXPIRED.
    """
    
    def __init__(self):
        self._app: Flask | None = None
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._sweep_interval = 15 * 60.0  # seconds
    
    def init_app(self, app: Flask) -> None:
        """Initialize the service with a Flask application.
        
        Args:
            app: Flask application instance.
        """
        self._app = app
        self._sweep_interval = app.config["SWEEP_INTERVAL_MINUTES"] * 60.0
        
        # Start background thread
        if app.config["RETENTION_SWEEPER_ENABLED"] and not app.config.get("TESTING"):
            self.start()
    
    def start(self) -> None:
        """Start the background sweep thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._sweep_loop, name="retention-sweeper", daemon=True)
        self._thread.start()
        logger.info(f"Retention sweeper started (every {self._sweep_interval:.0f}s)")
    
    def stop(self) -> None:
        """Stop the background sweep thread."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None
        logger.info("Retention sweeper stopped")
    
    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
    
    def sweep(self, now: datetime | None = None) -> SweepResult:
        """Run one sweep over all jobs that may still have a file.
        
        Must be called inside an application context. Deleting a file that is
        already gone is not an error.
        
        Args:
            now: Reference time for age computation. Defaults to the current time.
            
        Returns:
            Counts of deleted files, expired jobs and failures.
        """
        now = now or utcnow()
        max_age_seconds = current_app.config["RETENTION_MAX_AGE_MINUTES"] * 60
        result = SweepResult()
        
        for job in job_store.list_with_files():
            job_id = job.id
            try:
                status = job.status
                completed = status == JobStatus.COMPLETED
                age_seconds = job.age_seconds(now)
                if not (completed or age_seconds > max_age_seconds):
                    continue
                
                if delete_stored_file(job.file_path):
                    result.deleted += 1
                    logger.debug(f"Deleted file {job.file_path} of job {job_id}")
                
                if job_store.mark_file_deleted(job_id, expire_from=None if completed else status):
                    result.expired += 1
                    logger.info(f"Job {job_id} expired after {age_seconds / 60:.0f} minutes")
            except Exception as e:
                logger.error(f"Error sweeping job {job_id}: {e}")
                db.session.rollback()
                result.failed += 1
        
        if result.deleted or result.expired or result.failed:
            logger.info(
                f"Sweep finished: {result.deleted} files deleted, "
                f"{result.expired} jobs expired, {result.failed} failures"
            )
        return result
    
    def _sweep_loop(self) -> None:
        """Background thread loop for sweeping files."""
        while not self._stop_event.wait(timeout=self._sweep_interval):
            try:
                self._sweep_with_context()
            except Exception as e:
                logger.error(f"Error in sweep loop: {e}")
    
    def _sweep_with_context(self) -> None:
        if self._app is None:
            return
        
        with self._app.app_context():
            self.sweep()


# Global instance
retention_sweeper = RetentionSweeper()
