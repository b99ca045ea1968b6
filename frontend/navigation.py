"""Calendar navigation with a transition lock."""
import logging
import time
from datetime import date
from typing import Callable, List, Optional

from layout.view_range import VIEW_WEEK, get_view_days, navigate_view

logger = logging.getLogger(__name__)


class CalendarNavigator:
    """
    Tracks the anchor day and view of the calendar.

    Each navigation starts a transition during which further navigation
    is rejected, so overlapping animations cannot move the anchor twice.
    """

    PAGE_TRANSITION_SECONDS = 0.4
    TODAY_TRANSITION_SECONDS = 0.2

    def __init__(
        self,
        view: str = VIEW_WEEK,
        anchor: Optional[date] = None,
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], date] = date.today
    ):
        self.view = view
        self.clock = clock
        self.today = today
        self.anchor = anchor or today()
        self._locked_until = 0.0

    @property
    def is_transitioning(self) -> bool:
        return self.clock() < self._locked_until

    @property
    def visible_days(self) -> List[date]:
        return get_view_days(self.anchor, self.view)

    def _begin_transition(self, duration: float) -> bool:
        if self.is_transitioning:
            logger.debug("Navigation rejected during transition")
            return False
        self._locked_until = self.clock() + duration
        return True

    def go_previous(self) -> bool:
        if not self._begin_transition(self.PAGE_TRANSITION_SECONDS):
            return False
        self.anchor = navigate_view(self.anchor, 'prev', self.view)
        return True

    def go_next(self) -> bool:
        if not self._begin_transition(self.PAGE_TRANSITION_SECONDS):
            return False
        self.anchor = navigate_view(self.anchor, 'next', self.view)
        return True

    def go_today(self) -> bool:
        if not self._begin_transition(self.TODAY_TRANSITION_SECONDS):
            return False
        self.anchor = self.today()
        return True
