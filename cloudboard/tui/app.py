"""Textual TUI application for cloudboard."""

from __future__ import annotations

import logging
import queue

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from cloudboard.constants import EXIT_ERROR, EXIT_SUCCESS
from cloudboard.core.dashboard import Dashboard
from cloudboard.core.dialogs import dialog_geometry
from cloudboard.core.events import AppEvent, EventKind
from cloudboard.core.state import AppState
from cloudboard.services.sound import AlertSound
from cloudboard.tui.keys import map_key
from cloudboard.tui.styling import TUI_CSS
from cloudboard.tui.views import (
    render_body,
    render_dialog,
    render_status,
    render_tabs,
    render_toasts,
)

logger = logging.getLogger(__name__)


class CloudBoardTUI(App):
    """Textual front end driving a Dashboard.

    Keys and resizes are queued as AppEvents. The dashboard loop runs in a
    thread worker, polls that queue and asks the UI thread to draw each tick.

    Parameters
    ----------
    dashboard : Dashboard
        Dashboard to run
    start_worker : bool
        Whether to start the dashboard loop on mount (default: True)
        Set to False for tests that drive the dashboard directly

    Attributes
    ----------
    dashboard : Dashboard
        Dashboard being displayed
    original_handlers : list[logging.Handler]
        Root logging handlers to restore on exit
    worker_exit_code : int
        Exit code reported when the dashboard loop ends
    """

    CSS = TUI_CSS

    BINDINGS = [Binding("ctrl+c", "quit", "Quit", show=False, priority=True)]

    def __init__(self, dashboard: Dashboard, start_worker: bool = True) -> None:
        super().__init__()
        self.dashboard = dashboard
        self._start_worker = start_worker
        self._input_queue: queue.Queue[AppEvent] = queue.Queue()
        self.original_handlers: list[logging.Handler] = []
        self.original_level = logging.WARNING
        self.worker_exit_code = EXIT_SUCCESS

    def compose(self) -> ComposeResult:
        yield Static(id="tabs")
        yield Static(id="body")
        yield Static(id="status")
        yield Static(id="toasts")
        yield Static(id="dialog")

    def on_mount(self) -> None:
        """Handle mount event - route logging to the logs screen and start the loop."""
        root_logger = logging.getLogger()
        self.original_handlers = root_logger.handlers[:]
        self.original_level = root_logger.level

        root_logger.handlers = [self.dashboard.state.log_book]
        root_logger.setLevel(logging.DEBUG)

        for boto_module in ["botocore", "boto3", "urllib3"]:
            logging.getLogger(boto_module).setLevel(logging.WARNING)

        self.dashboard.sound = AlertSound(beep=self.ring_bell).play
        self.enqueue(AppEvent.resize(self.size.width, self.size.height))

        if self._start_worker:
            self.run_worker(self.run_dashboard, exit_on_error=False, thread=True)

    def on_unmount(self) -> None:
        """Handle unmount event - restore logging handlers."""
        root_logger = logging.getLogger()
        root_logger.handlers = self.original_handlers
        root_logger.setLevel(self.original_level)

    def enqueue(self, event: AppEvent) -> None:
        self._input_queue.put(event)

    def poll_event(self, timeout: float) -> AppEvent | None:
        """Return the next queued event, waiting at most timeout seconds."""
        try:
            return self._input_queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def on_key(self, event: events.Key) -> None:
        app_event = map_key(event.key, event.character)

        if app_event.kind is not EventKind.NONE:
            event.stop()
            self.enqueue(app_event)

    def on_resize(self, event: events.Resize) -> None:
        self.enqueue(AppEvent.resize(event.size.width, event.size.height))

    def action_quit(self) -> None:
        """Handle ctrl+c by asking the dashboard loop to quit."""
        self.enqueue(AppEvent.of(EventKind.QUIT))

    def ring_bell(self) -> None:
        self.call_from_thread(self.bell)

    def run_dashboard(self) -> None:
        """Run the dashboard loop in a worker thread."""
        try:
            self.dashboard.run(self.poll_event, self.render_from_thread)
        except Exception:
            logger.exception("Dashboard loop crashed")
            self.worker_exit_code = EXIT_ERROR
        finally:
            self.call_from_thread(self.exit, self.worker_exit_code)

    def render_from_thread(self, state: AppState) -> None:
        self.call_from_thread(self.render_state, state)

    def render_state(self, state: AppState) -> None:
        """Draw state into the widgets. Runs on the UI thread."""
        now = self.dashboard.clock()

        self.query_one("#tabs", Static).update(render_tabs(state))
        self.query_one("#body", Static).update(render_body(state, now))
        self.query_one("#status", Static).update(
            render_status(state, self.dashboard.seconds_until_refresh())
        )

        toasts = self.query_one("#toasts", Static)
        toast_text = render_toasts(state)
        toasts.display = toast_text is not None
        if toast_text is not None:
            toasts.update(toast_text)

        dialog = self.query_one("#dialog", Static)
        panel = render_dialog(state)
        dialog.display = panel is not None
        if panel is not None:
            percent, _ = dialog_geometry(state.dialog.kind, len(state.available_profiles))
            dialog.styles.height = f"{percent}%"
            dialog.update(panel)
