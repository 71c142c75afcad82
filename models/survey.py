from models import db
from datetime import datetime, timezone
import uuid


class SurveyRecord(db.Model):
    """SurveyRecord model - stores survey documents keyed by id"""
    __tablename__ = 'surveys'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Denormalized from the document for lookups
    title = db.Column(db.String, nullable=False, index=True)
    language = db.Column(db.String(10), nullable=False, index=True)
    created_by = db.Column(db.String(255), index=True)

    # Full survey in wire format (camelCase keys)
    document = db.Column(db.JSON, nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<SurveyRecord {self.id} ({self.language})>'
