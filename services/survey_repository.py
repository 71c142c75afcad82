"""
Survey Repository

Document store for surveys, keyed by id. Independent of the translation flow:
translated surveys are never written here automatically.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from models import db
from models.survey import SurveyRecord
from services.llm_models.survey_models import Survey

logger = logging.getLogger(__name__)


class SurveyRepository:
    """Persistence operations for Survey documents"""

    @staticmethod
    def save(survey: Survey) -> Survey:
        """
        Insert or update a survey.

        A survey without id (or with an unknown id) is inserted; otherwise the
        stored document is replaced. createdAt is kept from the first save.

        Args:
            survey: The survey to store

        Returns:
            The stored survey with id, createdAt and updatedAt set
        """
        now = datetime.now(timezone.utc)
        record = db.session.get(SurveyRecord, survey.id) if survey.id else None

        if record is None:
            survey = survey.model_copy(update={
                "id": survey.id or str(uuid.uuid4()),
                "created_at": survey.created_at or now,
                "updated_at": now
            })
            record = SurveyRecord(id=survey.id, created_at=survey.created_at)
            db.session.add(record)
            logger.info(f"Creating survey {survey.id}")
        else:
            survey = survey.model_copy(update={
                "created_at": record.created_at,
                "updated_at": now
            })
            logger.info(f"Updating survey {survey.id}")

        record.title = survey.title
        record.language = survey.language
        record.created_by = survey.created_by
        record.document = survey.to_wire()
        record.updated_at = now

        db.session.commit()
        return survey

    @staticmethod
    def find_by_id(survey_id: str) -> Optional[Survey]:
        record = db.session.get(SurveyRecord, survey_id)
        return SurveyRepository._to_survey(record) if record else None

    @staticmethod
    def find_all() -> List[Survey]:
        records = SurveyRecord.query.order_by(SurveyRecord.created_at).all()
        return [SurveyRepository._to_survey(r) for r in records]

    @staticmethod
    def find_by_language(language: str) -> List[Survey]:
        records = SurveyRecord.query.filter_by(language=language).all()
        return [SurveyRepository._to_survey(r) for r in records]

    @staticmethod
    def find_by_created_by(created_by: str) -> List[Survey]:
        records = SurveyRecord.query.filter_by(created_by=created_by).all()
        return [SurveyRepository._to_survey(r) for r in records]

    @staticmethod
    def find_by_title_containing(title: str) -> List[Survey]:
        """Case-insensitive substring match on the survey title"""
        records = SurveyRecord.query.filter(SurveyRecord.title.ilike(f"%{title}%")).all()
        return [SurveyRepository._to_survey(r) for r in records]

    @staticmethod
    def find_by_language_and_created_by(language: str, created_by: str) -> List[Survey]:
        records = SurveyRecord.query.filter_by(language=language, created_by=created_by).all()
        return [SurveyRepository._to_survey(r) for r in records]

    @staticmethod
    def exists_by_title_and_language(title: str, language: str) -> bool:
        return SurveyRecord.query.filter_by(title=title, language=language).first() is not None

    @staticmethod
    def delete_by_id(survey_id: str) -> bool:
        """
        Delete a survey.

        Returns:
            True if a survey was deleted, False if the id was unknown
        """
        record = db.session.get(SurveyRecord, survey_id)
        if record is None:
            return False

        db.session.delete(record)
        db.session.commit()
        logger.info(f"Deleted survey {survey_id}")
        return True

    @staticmethod
    def _to_survey(record: SurveyRecord) -> Survey:
        return Survey.model_validate(record.document)
