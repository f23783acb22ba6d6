"""Fire-and-forget alert sound playback."""

import logging
import sys
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


def terminal_bell() -> None:
    """Ring the terminal bell on stderr."""
    sys.stderr.write("\a")
    sys.stderr.flush()


class AlertSound:
    """Plays the alert sound on a detached thread.

    Playback is best effort: failures are logged at debug level and never
    reach the caller.

    Parameters
    ----------
    beep : Callable[[], None] | None
        Callable producing the sound. If None, rings the terminal bell
    """

    def __init__(self, beep: Callable[[], None] | None = None) -> None:
        self.beep = beep or terminal_bell

    def play(self) -> None:
        """Start playback and return immediately."""
        threading.Thread(target=self._play, name="alert-sound", daemon=True).start()

    def _play(self) -> None:
        try:
            self.beep()
        except Exception as e:
            logger.debug("Alert sound playback failed: %s", e)
