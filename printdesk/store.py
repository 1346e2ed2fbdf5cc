"""Persistent stores for print jobs and operator accounts."""

import logging

from sqlalchemy import case

from .models import JobStatus, PrintJob, User, db, utcnow

logger = logging.getLogger(__name__)


class JobStore:
    """CRUD access to the print_jobs table.
    
    Lookups return None for unknown ids; callers decide how to report that.
    No transition rules are enforced here.
    """
    
    def list_all(self) -> list[PrintJob]:
        """All jobs, newest first."""
        return PrintJob.query.order_by(
            PrintJob.created_at.desc(), PrintJob.id.desc()
        ).all()
    
    def list_for_queue(self) -> list[PrintJob]:
        """All jobs with pending ones first, each group newest first."""
        pending_first = case((PrintJob.status == JobStatus.PENDING, 0), else_=1)
        return PrintJob.query.order_by(
            pending_first, PrintJob.created_at.desc(), PrintJob.id.desc()
        ).all()
    
    def list_with_files(self) -> list[PrintJob]:
        """Jobs whose stored file has not been removed by the sweeper."""
        return PrintJob.query.filter(PrintJob.file_deleted_at.is_(None)).all()
    
    def get(self, job_id: int) -> PrintJob | None:
        return db.session.get(PrintJob, job_id)
    
    def create(
        self,
        *,
        display_name: str,
        file_path: str,
        original_filename: str,
        file_type: str,
        file_size: int,
        is_color: bool = False,
        copies: int = 1,
        page_range: str | None = None,
        page_count: int | None = None,
    ) -> PrintJob:
        """Insert a new PENDING job and commit it."""
        now = utcnow()
        job = PrintJob(
            display_name=display_name,
            file_path=file_path,
            original_filename=original_filename,
            file_type=file_type,
            file_size=file_size,
            page_count=page_count,
            is_color=is_color,
            copies=copies,
            page_range=page_range,
            status=JobStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        db.session.add(job)
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return job
    
    def update_status(self, job_id: int, status: JobStatus) -> PrintJob | None:
        """Set a job's status unconditionally."""
        job = self.get(job_id)
        if job is None:
            return None
        job.status = status
        job.updated_at = utcnow()
        db.session.commit()
        return job
    
    def mark_file_deleted(self, job_id: int, expire_from: JobStatus | None = None) -> bool:
        """Record that a job's stored file is gone.
        
        Args:
            job_id: The job whose file was removed.
            expire_from: If given, move the job to EXPIRED only while its status
                is still this value, so a concurrent status change wins.
                
        Returns:
            True if the job was moved to EXPIRED.
        """
        now = utcnow()
        expired = False
        if expire_from is not None:
            expired = PrintJob.query.filter_by(id=job_id, status=expire_from).update(
                {PrintJob.status: JobStatus.EXPIRED, PrintJob.updated_at: now},
                synchronize_session=False,
            ) > 0
        PrintJob.query.filter_by(id=job_id).update(
            {PrintJob.file_deleted_at: now},
            synchronize_session=False,
        )
        db.session.commit()
        return expired


class UserStore:
    """Lookup and seeding of operator accounts."""
    
    def get(self, user_id: int) -> User | None:
        return db.session.get(User, user_id)
    
    def get_by_username(self, username: str) -> User | None:
        return User.query.filter_by(username=username).first()
    
    def create(self, username: str, password: str) -> User:
        user = User(username=username)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    
    def seed(self, credentials: list[tuple[str, str]]) -> list[User]:
        """Create missing operators and reset passwords that no longer match.
        
        Args:
            credentials: (username, password) pairs.
            
        Returns:
            The users that were created or updated.
        """
        changed = []
        for username, password in credentials:
            user = self.get_by_username(username)
            if user is None:
                user = User(username=username)
                user.set_password(password)
                db.session.add(user)
                logger.info(f"Seeded operator: {username}")
            elif not user.check_password(password):
                user.set_password(password)
                logger.info(f"Updated password for operator: {username}")
            else:
                continue
            changed.append(user)
        db.session.commit()
        return changed


def parse_seed_operators(raw: str) -> list[tuple[str, str]]:
    """Parse "user:password;user2:password2" into pairs, skipping blanks."""
    pairs = []
    for entry in raw.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        username, sep, password = entry.partition(":")
        if not sep or not username.strip() or not password:
            raise ValueError(f"Invalid operator entry: {entry!r}")
        pairs.append((username.strip(), password))
    return pairs


# Global instances
job_store = JobStore()
user_store = UserStore()
