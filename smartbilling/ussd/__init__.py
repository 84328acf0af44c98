"""Mini README: Simulated USSD menu for the billing assistant.

``machine`` holds the state machine and its pure transition function,
``screens`` the fixed menu texts and ``scheduling`` the timer backends used
for the delayed return to the main menu.
"""

from .machine import MenuResponse, MenuState, MenuStateMachine, TRANSITIONS, transition
from .scheduling import ManualScheduler, ScheduledCall, Scheduler, TimerScheduler

__all__ = [
    "ManualScheduler",
    "MenuResponse",
    "MenuState",
    "MenuStateMachine",
    "ScheduledCall",
    "Scheduler",
    "TRANSITIONS",
    "TimerScheduler",
    "transition",
]
