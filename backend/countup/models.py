from datetime import datetime, timezone

from countup import db


# Range of the 32-bit INTEGER columns
INTEGER_MIN = -2**31
INTEGER_MAX = 2**31 - 1


def utcnow():
    return datetime.now(timezone.utc)


def _isoformat(value):
    return value.isoformat() if value else None


class Countdown(db.Model):
    """A count-up goal: current_value rises from 0 toward target_value."""
    __tablename__ = 'countdown'
    __table_args__ = (
        db.CheckConstraint('target_value >= 1', name='ck_countdown_target_positive'),
        db.CheckConstraint(
            'current_value >= 0 AND current_value <= target_value',
            name='ck_countdown_current_in_range',
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    target_value = db.Column(db.Integer, nullable=False)
    current_value = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'targetValue': self.target_value,
            'currentValue': self.current_value,
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Countdown id={self.id} {self.current_value}/{self.target_value}>"
