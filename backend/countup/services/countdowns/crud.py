import logging
from numbers import Integral
from typing import Any, Callable, Dict, List, Optional

from countup.errors import ValidationError
from countup.models import INTEGER_MAX, INTEGER_MIN, Countdown
from countup.store import CountdownStore


logger = logging.getLogger(__name__)

ChangeListener = Callable[[str, Dict[str, Any]], None]

MAX_NAME_LENGTH = 255


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def coerce_int(value: Any, field: str) -> int:
    """Accept ints and integer-like strings that fit an INTEGER column; reject everything else."""
    result = _to_int(value)
    if result is None:
        raise ValidationError(f'{field} must be an integer')
    if not INTEGER_MIN <= result <= INTEGER_MAX:
        raise ValidationError(f'{field} must be between {INTEGER_MIN} and {INTEGER_MAX}')
    return result


class CountdownService:
    """Validated operations over a CountdownStore.

    Every mutation keeps ``0 <= current_value <= target_value``. Successful
    mutations are reported to ``on_change`` as ``(event, payload)`` where
    event is ``'updated'`` or ``'deleted'``.
    """

    def __init__(self, store: CountdownStore, on_change: Optional[ChangeListener] = None):
        self.store = store
        self.on_change = on_change

    def create_countdown(self, name: Any, target_value: Any) -> Countdown:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError('name is required')
        name = name.strip()
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f'name must be at most {MAX_NAME_LENGTH} characters')
        if target_value is None:
            raise ValidationError('targetValue is required')
        target = coerce_int(target_value, 'targetValue')
        if target < 1:
            raise ValidationError('targetValue must be at least 1')
        countdown = self.store.create(name, target)
        logger.info(f"[create] countdown={countdown.id} name={countdown.name!r} target={countdown.target_value}")
        return countdown

    def list_countdowns(self) -> List[Countdown]:
        return self.store.list()

    def get_countdown(self, countdown_id: int) -> Countdown:
        return self.store.get(countdown_id)

    def increment_countdown(self, countdown_id: int) -> Countdown:
        # Single conditional UPDATE, so concurrent increments cannot overshoot or be lost
        changed = self.store.increment_clamped(countdown_id)
        countdown = self.store.get(countdown_id)
        if changed:
            logger.info(f"[increment] countdown={countdown_id} value={countdown.current_value}/{countdown.target_value}")
            self._notify('updated', countdown.to_dict())
        else:
            logger.debug(f"[increment-clamped] countdown={countdown_id} already at target")
        return countdown

    def set_countdown_value(self, countdown_id: int, value: Any) -> Countdown:
        if value is None:
            raise ValidationError('currentValue is required')
        new_value = coerce_int(value, 'currentValue')
        countdown = self.store.get(countdown_id)
        if new_value < 0 or new_value > countdown.target_value:
            raise ValidationError(f'currentValue must be between 0 and {countdown.target_value}')
        countdown = self.store.update(countdown_id, {'current_value': new_value})
        logger.info(f"[set] countdown={countdown_id} value={new_value}/{countdown.target_value}")
        self._notify('updated', countdown.to_dict())
        return countdown

    def reset_countdown(self, countdown_id: int) -> Countdown:
        return self.set_countdown_value(countdown_id, 0)

    def delete_countdown(self, countdown_id: int) -> None:
        self.store.delete(countdown_id)
        logger.info(f"[delete] countdown={countdown_id}")
        self._notify('deleted', {'id': countdown_id})

    def _notify(self, event: str, payload: Dict[str, Any]) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(event, payload)
        except Exception:
            # A failed push must not undo a committed mutation
            logger.exception(f"[notify-failed] event={event} payload_id={payload.get('id')}")
