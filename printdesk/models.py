"""Database models for printdesk."""

import enum
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from werkzeug.security import check_password_hash, generate_password_hash

db = SQLAlchemy()


class JobStatus(enum.Enum):
    """Status of a print job."""
    PENDING = "PENDING"         # Submitted, waiting for an operator
    PRINTING = "PRINTING"       # Operator has started printing
    COMPLETED = "COMPLETED"     # Printed and handed over
    EXPIRED = "EXPIRED"         # File removed by the retention sweeper before completion
    
    @classmethod
    def terminal_states(cls) -> set["JobStatus"]:
        """Return states that indicate a job is finished."""
        return {cls.COMPLETED, cls.EXPIRED}
    
    @classmethod
    def from_value(cls, value: str) -> "JobStatus | None":
        """Look up a status by its wire value, or None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


# Status changes operators may request. EXPIRED is only ever set by the sweeper.
ALLOWED_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.PRINTING},
    JobStatus.PRINTING: {JobStatus.COMPLETED},
    JobStatus.COMPLETED: set(),
    JobStatus.EXPIRED: set(),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to timezone-naive datetimes read back from the database."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class User(db.Model):
    """Operator account."""
    
    __tablename__ = "users"
    
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    
    def __repr__(self) -> str:
        return f"<User {self.username}>"
    
    def set_password(self, raw: str) -> None:
        self.password_hash = generate_password_hash(raw)
    
    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)
    
    def to_dict(self) -> dict:
        """Convert the user to a dictionary, without credentials."""
        return {
            "id": self.id,
            "username": self.username,
        }


class PrintJob(db.Model):
    """One submitted document plus its print options."""
    
    __tablename__ = "print_jobs"
    
    id = db.Column(db.Integer, primary_key=True)
    display_name = db.Column(db.String(255), nullable=False)
    
    # Stored file information. file_path is the generated name inside UPLOAD_FOLDER.
    file_path = db.Column(db.String(255), unique=True, nullable=False)
    original_filename = db.Column(db.String(255), nullable=False)
    file_type = db.Column(db.String(255), nullable=False)
    file_size = db.Column(db.Integer, nullable=False)
    page_count = db.Column(db.Integer, nullable=True)
    
    # Print options
    is_color = db.Column(db.Boolean, nullable=False, default=False)
    copies = db.Column(db.Integer, nullable=False, default=1)
    page_range = db.Column(db.String(100), nullable=True)
    
    status = db.Column(db.Enum(JobStatus), nullable=False, default=JobStatus.PENDING)
    
    # Timestamps
    created_at = db.Column(db.DateTime, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, nullable=False)
    file_deleted_at = db.Column(db.DateTime, nullable=True, index=True)  # set by the retention sweeper
    
    def __repr__(self) -> str:
        return f"<PrintJob {self.id} [{self.status.value}]>"
    
    def is_terminal(self) -> bool:
        """Check if the job is in a terminal (finished) state."""
        return self.status in JobStatus.terminal_states()
    
    def can_transition_to(self, status: JobStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]
    
    def age_seconds(self, now: datetime | None = None) -> float:
        """Seconds elapsed since the job was submitted."""
        now = now or utcnow()
        return (as_utc(now) - as_utc(self.created_at)).total_seconds()
    
    def to_public_dict(self) -> dict:
        """Fields a submitter may see on the confirmation page."""
        return {
            "id": self.id,
            "displayName": self.display_name,
            "originalFilename": self.original_filename,
            "fileType": self.file_type,
            "fileSize": self.file_size,
            "isColor": self.is_color,
            "copies": self.copies,
            "pageRange": self.page_range,
            "status": self.status.value,
            "createdAt": as_utc(self.created_at).isoformat() if self.created_at else None,
        }
    
    def to_dict(self) -> dict:
        """Convert the job to a dictionary for the operator queue."""
        data = self.to_public_dict()
        data.update({
            "filePath": self.file_path,
            "pageCount": self.page_count,
            "updatedAt": as_utc(self.updated_at).isoformat() if self.updated_at else None,
            "fileDeletedAt": as_utc(self.file_deleted_at).isoformat() if self.file_deleted_at else None,
        })
        return data
