"""Persistence for countdown records.

The store wraps an injected SQLAlchemy session and knows nothing about
HTTP or Flask; it does not range-check ``current_value`` (that belongs to
the service layer).
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from countup.errors import NotFound, TransientFetchError, ValidationError
from countup.models import INTEGER_MAX, INTEGER_MIN, Countdown, utcnow


MUTABLE_FIELDS = frozenset({'name', 'current_value'})


def _valid_id(countdown_id: int) -> bool:
    # Ids beyond the column range cannot exist and would overflow the driver
    return INTEGER_MIN <= countdown_id <= INTEGER_MAX


class CountdownStore:
    def __init__(self, session: Session):
        self.session = session

    def create(self, name: str, target_value: int) -> Countdown:
        if not name:
            raise ValidationError('name is required')
        if target_value < 1:
            raise ValidationError('targetValue must be at least 1')
        if target_value > INTEGER_MAX:
            raise ValidationError(f'targetValue must be at most {INTEGER_MAX}')
        now = utcnow()
        countdown = Countdown(
            name=name,
            target_value=target_value,
            current_value=0,
            created_at=now,
            updated_at=now,
        )
        with self._guard():
            self.session.add(countdown)
            self.session.commit()
        return countdown

    def list(self) -> List[Countdown]:
        with self._guard():
            return list(self.session.scalars(select(Countdown).order_by(Countdown.id)))

    def get(self, countdown_id: int) -> Countdown:
        if not _valid_id(countdown_id):
            raise NotFound(f'Countdown {countdown_id} not found')
        # populate_existing: a long-lived session must still see other writers' commits
        with self._guard():
            countdown = self.session.get(Countdown, countdown_id, populate_existing=True)
        if countdown is None:
            raise NotFound(f'Countdown {countdown_id} not found')
        return countdown

    def update(self, countdown_id: int, fields: Dict[str, Any]) -> Countdown:
        unknown = set(fields) - MUTABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        countdown = self.get(countdown_id)
        for key, value in fields.items():
            setattr(countdown, key, value)
        countdown.updated_at = utcnow()
        with self._guard():
            self.session.add(countdown)
            self.session.commit()
        return countdown

    def increment_clamped(self, countdown_id: int) -> bool:
        """Atomically add one unless the target is already reached.

        Returns True when a row changed. A False result means either the
        countdown is at its target or it does not exist.
        """
        if not _valid_id(countdown_id):
            return False
        stmt = (
            update(Countdown)
            .where(Countdown.id == countdown_id)
            .where(Countdown.current_value < Countdown.target_value)
            .values(current_value=Countdown.current_value + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        with self._guard():
            changed = self.session.execute(stmt).rowcount == 1
            self.session.commit()
        return changed

    def delete(self, countdown_id: int) -> None:
        countdown = self.get(countdown_id)
        with self._guard():
            self.session.delete(countdown)
            self.session.commit()

    @contextmanager
    def _guard(self) -> Iterator[None]:
        """Roll back and translate database failures into TransientFetchError."""
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise TransientFetchError(f'Database error: {exc.__class__.__name__}') from exc
