"""
Base model with common fields and utility methods.
"""
from datetime import UTC, datetime

from trainerhub import db


def utcnow():
    """Timezone-aware UTC timestamp used for column defaults."""
    return datetime.now(UTC)


class BaseModel(db.Model):
    """
    Base model class that includes common fields and methods for all models.
    """
    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self):
        """
        Convert model instance to dictionary.

        Returns:
            dict: Dictionary representation of the model.
        """
        return {column.name: getattr(self, column.name)
                for column in self.__table__.columns}
