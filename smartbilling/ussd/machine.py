"""Mini README: Finite-state machine behind the simulated USSD menu.

Structure:
    * MenuState - enumeration of menu screens plus the terminal ``EXITED``.
    * TRANSITIONS - explicit (state, input) -> state table.
    * MenuResponse - next state, text to display and auto-return flag.
    * transition - pure transition function.
    * MenuStateMachine - stateful session that schedules auto-returns.

From the main menu digits 1-5 open a submenu and 0 ends the session. Inside a
submenu 0 goes back; any other input shows a "feature simulated" notice and
returns to the main menu after a delay. That delayed return is a scheduled
callback tagged with the session generation: any later input or reset bumps
the generation and cancels it, so a callback that still fires is ignored.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from ..logging_utils import get_logger
from .scheduling import ScheduledCall, Scheduler, TimerScheduler
from .screens import (
    FAREWELL_MESSAGE,
    FEATURE_SIMULATED_MESSAGE,
    INVALID_CHOICE_MESSAGE,
    SCREENS,
    SESSION_ENDED_MESSAGE,
)

LOGGER = get_logger(__name__)

DEFAULT_RETURN_DELAY_SECONDS = 2.0


class MenuState(str, Enum):
    """Screens of the USSD simulator."""

    MAIN = "main"
    PAY_BILL = "payBill"
    PAY_INSTALMENT = "payInstalment"
    SPLIT_BILL = "splitBill"
    HISTORY = "history"
    SETTINGS = "settings"
    EXITED = "exited"

    @property
    def screen(self) -> str:
        return SCREENS[self.value]

    @property
    def is_submenu(self) -> bool:
        return self not in (MenuState.MAIN, MenuState.EXITED)


SUBMENUS = tuple(state for state in MenuState if state.is_submenu)

TRANSITIONS: Dict[Tuple[MenuState, str], MenuState] = {
    (MenuState.MAIN, "1"): MenuState.PAY_BILL,
    (MenuState.MAIN, "2"): MenuState.PAY_INSTALMENT,
    (MenuState.MAIN, "3"): MenuState.SPLIT_BILL,
    (MenuState.MAIN, "4"): MenuState.HISTORY,
    (MenuState.MAIN, "5"): MenuState.SETTINGS,
    (MenuState.MAIN, "0"): MenuState.EXITED,
    **{(state, "0"): MenuState.MAIN for state in SUBMENUS},
}


@dataclass(frozen=True, slots=True)
class MenuResponse:
    """Outcome of feeding one input into the menu."""

    state: MenuState
    display: str
    auto_return: bool = False

    def as_dict(self) -> Dict[str, object]:
        return {
            "state": self.state.value,
            "display": self.display,
            "auto_return": self.auto_return,
        }


def transition(state: MenuState, choice: str) -> MenuResponse:
    """Return the response for ``choice`` entered while on ``state``."""

    choice = (choice or "").strip()
    if state is MenuState.EXITED:
        return MenuResponse(MenuState.EXITED, SESSION_ENDED_MESSAGE)

    target = TRANSITIONS.get((state, choice))
    if target is MenuState.EXITED:
        return MenuResponse(MenuState.EXITED, FAREWELL_MESSAGE)
    if target is not None:
        return MenuResponse(target, target.screen)
    if state is MenuState.MAIN:
        return MenuResponse(MenuState.MAIN, f"{INVALID_CHOICE_MESSAGE}\n\n{MenuState.MAIN.screen}")
    return MenuResponse(state, FEATURE_SIMULATED_MESSAGE, auto_return=True)


class MenuStateMachine:
    """One USSD session: current state plus any pending auto-return."""

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        *,
        return_delay_seconds: float = DEFAULT_RETURN_DELAY_SECONDS,
        listener: Optional[Callable[[MenuResponse], None]] = None,
    ) -> None:
        self._scheduler = scheduler or TimerScheduler()
        self._return_delay = return_delay_seconds
        self._listener = listener
        self._lock = threading.RLock()
        self._generation = 0
        self._pending: Optional[ScheduledCall] = None
        self._response = MenuResponse(MenuState.MAIN, MenuState.MAIN.screen)

    @property
    def state(self) -> MenuState:
        return self._response.state

    @property
    def display(self) -> str:
        return self._response.display

    @property
    def awaiting_return(self) -> bool:
        """Whether an auto-return to the main menu is scheduled."""

        return self._pending is not None

    def current(self) -> MenuResponse:
        return self._response

    def send(self, choice: str) -> MenuResponse:
        """Feed user input into the menu and return what to display."""

        with self._lock:
            self._cancel_pending()
            response = transition(self.state, choice)
            LOGGER.debug("USSD %s --%r--> %s", self.state.value, choice, response.state.value)
            self._response = response
            if response.auto_return:
                self._schedule_return()
            return response

    def reset(self) -> MenuResponse:
        """Start a fresh session on the main menu, dropping any pending return."""

        with self._lock:
            self._cancel_pending()
            self._response = MenuResponse(MenuState.MAIN, MenuState.MAIN.screen)
            LOGGER.debug("USSD session reset")
            return self._response

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule_return(self) -> None:
        generation = self._generation
        self._pending = self._scheduler.schedule(
            self._return_delay, lambda: self._auto_return(generation)
        )

    def _auto_return(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                LOGGER.debug("Ignoring stale USSD auto-return (generation %s)", generation)
                return
            self._pending = None
            self._generation += 1
            self._response = MenuResponse(MenuState.MAIN, MenuState.MAIN.screen)
            response = self._response
        LOGGER.debug("USSD auto-returned to main menu")
        if self._listener is not None:
            self._listener(response)
