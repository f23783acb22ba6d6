"""Event-driven dashboard core.

The Dashboard applies one input event per tick to its AppState, then drains
background notifications, checks long-running instance alerts and runs the
auto-refresh timer. Cloud calls made from actions block the loop thread only;
the front end keeps drawing and reading keys on its own thread.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from cloudboard.constants import (
    ALERT_CHECK_INTERVAL_SECONDS,
    BOOST_REFRESH_INTERVAL_SECONDS,
    SESSION_EXPIRED_KEYWORDS,
    SSO_CONFIG_MISSING_MARKER,
    TOAST_TTL_SECONDS,
    InstanceState,
)
from cloudboard.core.bridge import (
    Notification,
    NotificationBridge,
    ProfileActivated,
    ProfileActivationFailed,
    SsoLoginFailed,
    SsoLoginSucceeded,
    activate_profile_task,
    spawn_worker,
    sso_login_task,
)
from cloudboard.core.config import AppConfig
from cloudboard.core.dialogs import DialogNavigator, screen_max_scroll
from cloudboard.core.events import AppEvent, EventKind
from cloudboard.core.models import (
    NO_DIALOG,
    TAB_SCREENS,
    AutoStopSchedule,
    Dialog,
    DialogKind,
    Identity,
    Screen,
    Toast,
    ToastKind,
)
from cloudboard.core.settings import (
    SettingsError,
    SettingsField,
    SettingsStore,
    load_settings_or_default,
)
from cloudboard.core.state import AppState
from cloudboard.logging.handlers import SUCCESS
from cloudboard.providers.aws import AwsClient, credentials_configured, list_profiles, run_sso_login
from cloudboard.providers.exceptions import ProviderError
from cloudboard.services.sound import AlertSound
from cloudboard.utils import format_duration

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Identity], Any]
LoginHelper = Callable[[str | None], tuple[bool, str]]


def utc_now() -> datetime:
    return datetime.now(UTC)


class Dashboard:
    """Owns AppState and applies every mutation to it.

    Parameters
    ----------
    state : AppState
        Initial state; the dashboard keeps and mutates this object
    client_factory : Callable[[Identity], Any]
        Builds a cloud client for an identity when a profile is activated
    login : Callable[[str | None], tuple[bool, str]]
        Runs the SSO login helper for an optional profile
    settings_store : SettingsStore
        Persists committed settings
    bridge : NotificationBridge | None
        Channel for background results. If None, a new one is created
    clock : Callable[[], datetime] | None
        Source of timezone-aware current time. If None, uses UTC wall time
    spawn : Callable[[Callable[[], None], str], None]
        Starts a background task given the task and a thread name
    sound : Callable[[], None] | None
        Starts alert sound playback without blocking. If None, uses AlertSound
    tick_seconds : float
        Input poll timeout for one loop iteration
    """

    def __init__(
        self,
        state: AppState,
        client_factory: ClientFactory,
        login: LoginHelper,
        settings_store: SettingsStore,
        bridge: NotificationBridge | None = None,
        clock: Callable[[], datetime] | None = None,
        spawn: Callable[[Callable[[], None], str], None] = spawn_worker,
        sound: Callable[[], None] | None = None,
        tick_seconds: float = 0.25,
    ) -> None:
        self.state = state
        self.client_factory = client_factory
        self.login = login
        self.settings_store = settings_store
        self.bridge = bridge or NotificationBridge()
        self.clock = clock or utc_now
        self.spawn = spawn
        self.sound = sound or AlertSound().play
        self.tick_seconds = tick_seconds
        self.dialogs = DialogNavigator(self)

    @classmethod
    def create(
        cls,
        config: AppConfig,
        settings_store: SettingsStore | None = None,
        client_factory: ClientFactory | None = None,
        profiles: list[str] | None = None,
        sound: Callable[[], None] | None = None,
    ) -> Dashboard:
        """Build a dashboard from process configuration.

        Loads settings (defaults on failure), resolves the startup profile,
        constructs the cloud client and opens the Setup dialog when no
        credentials are configured.

        Parameters
        ----------
        config : AppConfig
            Process configuration
        settings_store : SettingsStore | None
            Settings persistence. If None, uses config.settings_path
        client_factory : ClientFactory | None
            Cloud client factory. If None, uses AwsClient
        profiles : list[str] | None
            Known profiles. If None, read from config.aws_config_path
        sound : Callable[[], None] | None
            Alert sound trigger

        Returns
        -------
        Dashboard
            Dashboard ready to run

        Raises
        ------
        ProviderError
            If the initial cloud client cannot be constructed
        """
        store = settings_store or SettingsStore(config.settings_path)
        settings = load_settings_or_default(store)
        available = list_profiles(config.aws_config_path) if profiles is None else list(profiles)

        profile = config.profile
        if profile is None and settings.default_profile:
            if settings.default_profile in available:
                profile = settings.default_profile
                logger.info("Using default profile: %s", profile)
            else:
                logger.warning(
                    "Default profile '%s' not found in available profiles",
                    settings.default_profile,
                )

        identity = Identity(profile=profile, region=config.region)
        factory = client_factory or AwsClient
        client = factory(identity)

        configured = credentials_configured()
        if configured:
            logger.info("Cloud credentials detected")
        else:
            logger.warning("Cloud credentials not configured")

        state = AppState(
            client=client,
            settings=settings,
            identity=identity,
            configured=configured,
            dialog=NO_DIALOG if configured else Dialog(DialogKind.SETUP),
            status_message="Ready" if configured else "Cloud credentials not configured",
            auto_refresh_interval=settings.refresh_interval_secs,
            available_profiles=available,
            selected_profile_index=available.index(profile) if profile in available else 0,
            active_profile_name=profile or "default",
        )

        return cls(
            state,
            client_factory=factory,
            login=functools.partial(run_sso_login, command=config.login_command),
            settings_store=store,
            sound=sound,
            tick_seconds=config.tick_seconds,
        )

    def run(
        self,
        poll: Callable[[float], AppEvent | None],
        render: Callable[[AppState], None],
    ) -> None:
        """Run the main loop until a Quit event is applied.

        Parameters
        ----------
        poll : Callable[[float], AppEvent | None]
            Returns the next input event, waiting at most the given seconds
        render : Callable[[AppState], None]
            Draws the state; must not modify it
        """
        logger.info("Dashboard started")

        while True:
            render(self.state)

            event = poll(self.tick_seconds)
            if event is not None:
                self._guarded(self.apply_event, event)

            self.tick()

            if self.state.should_quit:
                break

        logger.info("Dashboard stopped")

    def tick(self) -> None:
        """Run the per-tick checks in their fixed order."""
        self._guarded(self.check_async_notifications)
        self._guarded(self.check_alerts)
        self._guarded(self.check_auto_refresh)

    def _guarded(self, step: Callable[..., None], *args: Any) -> None:
        try:
            step(*args)
        except Exception as e:
            logger.exception("Unexpected error in %s", step.__name__)
            self.state.status_message = f"Error: {e}"

    def apply_event(self, event: AppEvent) -> None:
        """Apply one input event.

        While a dialog is open the event goes to the dialog navigator only.

        Parameters
        ----------
        event : AppEvent
            Event to apply
        """
        state = self.state

        if state.dialog.is_open:
            self.dialogs.handle(event)
            return

        kind = event.kind

        if kind is EventKind.QUIT:
            state.should_quit = True
        elif kind is EventKind.NAVIGATE_TAB:
            self.navigate_tab(event.index)
        elif kind is EventKind.UP:
            self.move_selection(-1)
        elif kind is EventKind.DOWN:
            self.move_selection(1)
        elif kind is EventKind.REFRESH:
            self.refresh_data()
        elif kind is EventKind.START:
            self.start_selected_instance()
        elif kind is EventKind.STOP:
            self.stop_selected_instance()
        elif kind is EventKind.TERMINATE:
            self.confirm_terminate_instance()
        elif kind is EventKind.SCHEDULE:
            self.open_schedule_dialog()
        elif kind is EventKind.SHOW_HELP:
            self.open_dialog(Dialog(DialogKind.HELP))
        elif kind is EventKind.ENTER:
            self.handle_enter()
        elif kind is EventKind.RESIZE:
            state.window_size = (event.width, event.height)
        elif kind is EventKind.OPEN_SETTINGS:
            self.open_settings_dialog()
        elif kind is EventKind.CONFIGURE_PROVIDER:
            self.open_dialog(Dialog(DialogKind.CONFIGURE_PROVIDER))
        elif kind is EventKind.SHOW_CHANGELOG:
            if state.current_screen is Screen.ABOUT:
                self.open_dialog(Dialog(DialogKind.CHANGELOG))

    def open_dialog(self, dialog: Dialog) -> None:
        self.state.dialog = dialog
        self.state.dialog_scroll_offset = 0

    def close_dialog(self) -> None:
        self.state.dialog = NO_DIALOG

    def navigate_tab(self, index: int) -> None:
        """Switch to the screen at a tab index.

        Unknown indexes keep the current screen. Logs is only reachable while
        the logs panel is enabled in the committed settings.
        """
        state = self.state
        screen = TAB_SCREENS[index] if 0 <= index < len(TAB_SCREENS) else state.current_screen

        if screen is Screen.LOGS and not state.settings.show_logs_panel:
            screen = state.current_screen

        if screen is not state.current_screen:
            state.current_screen = screen
            state.scroll_offset = 0
            logger.info("Navigated to %s screen", screen.value)

    def move_selection(self, delta: int) -> None:
        """Move the list selection, or scroll on screens without a list.

        List selections clamp at both ends and never wrap.
        """
        state = self.state

        if state.current_screen is Screen.INSTANCES:
            if state.instances:
                state.instance_selected = min(
                    max(state.instance_selected + delta, 0), len(state.instances) - 1
                )
        elif state.current_screen is Screen.FUNCTIONS:
            if state.functions:
                state.function_selected = min(
                    max(state.function_selected + delta, 0), len(state.functions) - 1
                )
        elif delta > 0:
            max_scroll = screen_max_scroll(state.current_screen, state.window_size)
            state.scroll_offset = min(state.scroll_offset + 1, max_scroll)
        else:
            state.scroll_offset = max(state.scroll_offset - 1, 0)

    def handle_enter(self) -> None:
        state = self.state

        if state.current_screen is Screen.INSTANCES:
            self.refresh_data()
        elif state.current_screen is Screen.FUNCTIONS:
            function = state.selected_function
            if function is not None:
                state.status_message = f"Function invocation coming soon: {function.name}"

    @staticmethod
    def is_session_expired_error(message: str) -> bool:
        """Whether a provider error text means the credentials expired."""
        lowered = message.lower()
        return any(keyword in lowered for keyword in SESSION_EXPIRED_KEYWORDS)

    def refresh_data(self) -> None:
        """Reload the resource list shown on the current screen.

        Failures are reported in the status line and the log. Expired
        credentials open the SessionExpired dialog. The loading flag is
        cleared and the refresh time stamped on every path.
        """
        state = self.state
        state.is_loading = True
        state.status_message = "Loading..."

        try:
            if state.current_screen in (Screen.HOME, Screen.INSTANCES):
                self._refresh_instances()
            elif state.current_screen is Screen.FUNCTIONS:
                self._refresh_functions()
            else:
                state.status_message = "Nothing to refresh on this screen"
        finally:
            state.is_loading = False
            state.last_refresh = self.clock()

    def _refresh_instances(self) -> None:
        state = self.state

        try:
            instances = state.client.list_instances()
        except ProviderError as e:
            self._report_refresh_error("instances", e)
            return

        state.instances = instances
        if instances:
            state.instance_selected = min(state.instance_selected, len(instances) - 1)
        state.status_message = f"Loaded {len(instances)} instances"
        logger.log(SUCCESS, "Refreshed instances: %d loaded", len(instances))

    def _refresh_functions(self) -> None:
        state = self.state

        try:
            functions = state.client.list_functions()
        except ProviderError as e:
            self._report_refresh_error("functions", e)
            return

        state.functions = functions
        if functions:
            state.function_selected = min(state.function_selected, len(functions) - 1)
        state.status_message = f"Loaded {len(functions)} functions"
        logger.log(SUCCESS, "Refreshed functions: %d loaded", len(functions))

    def _report_refresh_error(self, resource: str, error: ProviderError) -> None:
        message = str(error)
        self.state.status_message = f"Error: {message}"
        logger.error("Failed to load %s: %s", resource, message)

        if self.is_session_expired_error(message):
            self.open_dialog(Dialog(DialogKind.SESSION_EXPIRED))
            logger.warning("Cloud session token expired - credentials need refresh")

    def add_toast(self, message: str, kind: ToastKind) -> None:
        self.state.toasts.append(Toast(message, kind, self.clock()))

    def purge_toasts(self) -> None:
        """Drop toasts that reached their time to live."""
        now = self.clock()
        self.state.toasts = [
            toast
            for toast in self.state.toasts
            if (now - toast.created_at).total_seconds() < TOAST_TTL_SECONDS
        ]

    def all_instances_stable(self) -> bool:
        return all(instance.is_stable for instance in self.state.instances)

    def current_refresh_interval(self) -> int:
        if self.state.boost_refresh:
            return BOOST_REFRESH_INTERVAL_SECONDS
        return self.state.auto_refresh_interval

    def check_auto_refresh(self) -> None:
        """Refresh when the effective interval has elapsed.

        Suspended on the About screen and while any dialog is open. Boost
        mode ends once every instance reports a stable state.
        """
        state = self.state

        if state.current_screen is Screen.ABOUT or state.dialog.is_open:
            return

        self.purge_toasts()

        if state.boost_refresh and self.all_instances_stable():
            state.boost_refresh = False
            logger.debug("All instances stable, leaving boost refresh")

        if state.last_refresh is None:
            self.refresh_data()
            return

        elapsed = int((self.clock() - state.last_refresh).total_seconds())
        if elapsed >= self.current_refresh_interval():
            self.refresh_data()

    def seconds_until_refresh(self) -> int | None:
        """Seconds left before the next auto-refresh, for display.

        Returns
        -------
        int | None
            None while auto-refresh is suspended or before the first refresh
        """
        state = self.state

        if state.current_screen is Screen.ABOUT or state.dialog.is_open:
            return None
        if state.last_refresh is None:
            return None

        elapsed = int((self.clock() - state.last_refresh).total_seconds())
        return max(self.current_refresh_interval() - elapsed, 0)

    def start_selected_instance(self) -> None:
        self._run_instance_action("start", "Starting", "Started", "start_instance")

    def stop_selected_instance(self) -> None:
        self._run_instance_action("stop", "Stopping", "Stopped", "stop_instance")

    def _run_instance_action(self, verb: str, progress: str, done: str, method: str) -> None:
        state = self.state

        if state.current_screen is not Screen.INSTANCES:
            return

        instance = state.selected_instance
        if instance is None:
            return

        self._perform_instance_action(instance.id, instance.name, verb, progress, done, method)

    def _perform_instance_action(
        self,
        instance_id: str,
        name: str,
        verb: str,
        progress: str,
        done: str,
        method: str,
    ) -> None:
        state = self.state
        state.status_message = f"{progress} {instance_id}..."

        try:
            getattr(state.client, method)(instance_id)
        except ProviderError as e:
            state.status_message = f"Failed to {verb}: {e}"
            self.add_toast(f"✗ Failed to {verb}: {name}", ToastKind.ERROR)
            logger.error("Failed to %s %s: %s", verb, name, e)
            return

        state.status_message = f"{done} {instance_id}"
        self.add_toast(f"✓ {done}: {name}", ToastKind.SUCCESS)
        logger.log(SUCCESS, "%s instance: %s (%s)", done, name, instance_id)
        state.boost_refresh = True
        self.refresh_data()

    def confirm_terminate_instance(self) -> None:
        """Ask for confirmation before terminating the selected instance."""
        if self.state.current_screen is not Screen.INSTANCES:
            return

        instance = self.state.selected_instance
        if instance is not None:
            self.open_dialog(Dialog.confirm_terminate(instance.id))

    def terminate_instance(self, instance_id: str) -> None:
        """Terminate an instance by id, captured when the dialog opened."""
        name = self.state.instance_name(instance_id)
        self._perform_instance_action(
            instance_id, name, "terminate", "Terminating", "Terminated", "terminate_instance"
        )

    def open_schedule_dialog(self) -> None:
        if self.state.current_screen is not Screen.INSTANCES:
            return

        instance = self.state.selected_instance
        if instance is not None:
            self.open_dialog(Dialog.schedule_auto_stop(instance.id))

    def schedule_auto_stop(self, instance_id: str, duration: timedelta) -> None:
        """Record an advisory stop time, replacing any earlier one for the instance.

        Parameters
        ----------
        instance_id : str
            Instance to schedule
        duration : timedelta
            Delay from now until the stop time
        """
        state = self.state
        stop_time = self.clock() + duration
        name = state.instance_name(instance_id)

        state.schedules = [s for s in state.schedules if s.instance_id != instance_id]
        state.schedules.append(AutoStopSchedule(instance_id, stop_time))

        stamp = stop_time.strftime("%H:%M:%S")
        state.status_message = f"Scheduled auto-stop for {instance_id} at {stamp}"
        self.add_toast(f"⏰ Scheduled: {name}", ToastKind.SUCCESS)
        logger.log(SUCCESS, "Scheduled auto-stop for %s (%s) at %s", name, instance_id, stamp)

    def check_alerts(self) -> None:
        """Alert on running instances past the threshold without a schedule.

        Runs at most once per ALERT_CHECK_INTERVAL_SECONDS. Each distinct
        alert message is raised only once per process.
        """
        state = self.state
        now = self.clock()

        if state.last_alert_check is not None:
            if (now - state.last_alert_check).total_seconds() < ALERT_CHECK_INTERVAL_SECONDS:
                return

        state.last_alert_check = now
        threshold = timedelta(seconds=state.settings.alert_threshold_secs)

        for instance in state.instances:
            if instance.state != InstanceState.RUNNING.value:
                continue
            if state.schedule_for(instance.id) is not None:
                continue
            if instance.launch_time is None:
                continue

            running_for = now - instance.launch_time
            if running_for <= threshold:
                continue

            message = (
                f"⚠️ Instance {instance.name} ({instance.id}) running for "
                f"{format_duration(running_for)} without auto-stop!"
            )
            if message in state.pending_alerts:
                continue

            state.pending_alerts.append(message)
            self.open_dialog(Dialog.alert(message))
            logger.warning("Long-running instance: %s (%s)", instance.name, instance.id)

            if state.settings.sound_enabled:
                self.sound()

    def open_settings_dialog(self) -> None:
        state = self.state
        state.settings_draft = state.settings.copy()
        state.settings_selected_field = SettingsField.REFRESH_INTERVAL
        self.open_dialog(Dialog(DialogKind.SETTINGS))
        logger.info("Opened settings dialog")

    def save_settings(self) -> None:
        """Commit the draft, persist it and close the dialog."""
        state = self.state
        draft = state.settings_draft
        state.settings_draft = None

        if draft is not None:
            state.settings = draft
            state.auto_refresh_interval = draft.refresh_interval_secs

            try:
                self.settings_store.save(draft)
            except SettingsError as e:
                self.add_toast(f"Failed to save settings: {e}", ToastKind.ERROR)
                logger.error("Failed to save settings: %s", e)
            else:
                self.add_toast("Settings saved", ToastKind.SUCCESS)
                logger.log(SUCCESS, "Settings saved")

        self.close_dialog()

    def cancel_settings(self) -> None:
        self.state.settings_draft = None
        self.close_dialog()
        logger.info("Settings dialog cancelled")

    def modify_current_setting(self, delta: int) -> None:
        """Change the selected field of the draft; delta sign picks the direction."""
        draft = self.state.settings_draft
        if draft is None:
            return

        forward = delta > 0
        selected = self.state.settings_selected_field

        if selected is SettingsField.REFRESH_INTERVAL:
            draft.cycle_refresh_interval(forward)
        elif selected is SettingsField.SHOW_LOGS_PANEL:
            draft.toggle_logs_panel()
        elif selected is SettingsField.LOG_LEVEL:
            draft.cycle_log_level(forward)
        elif selected is SettingsField.ALERT_THRESHOLD:
            draft.cycle_alert_threshold(forward)
        elif selected is SettingsField.SOUND_ENABLED:
            draft.toggle_sound()

    def navigate_settings_field(self, up: bool) -> None:
        field = self.state.settings_selected_field
        self.state.settings_selected_field = field.prev() if up else field.next()

    def trigger_test_alert(self) -> None:
        self.sound()
        self.add_toast("🔔 Test Alert: System Sound Working", ToastKind.INFO)
        logger.info("Triggered test alert sound")

    def login_with_sso(self) -> None:
        """Start the SSO login helper in the background for the highlighted profile."""
        state = self.state
        state.status_message = "Initiating SSO Login..."
        self.add_toast("🔑 Starting SSO login... check browser", ToastKind.INFO)

        profile = state.highlighted_profile if state.available_profiles else None
        self.spawn(sso_login_task(self.bridge, self.login, profile), "sso-login")
        logger.info("Started SSO login for profile %s", profile or "default")

    def activate_profile(self, profile: str) -> None:
        """Switch identity and rebuild the cloud client in the background.

        The identity is replaced immediately; the client is swapped when the
        ProfileActivated notification is drained.
        """
        state = self.state
        state.status_message = f"Switching to profile: {profile}..."
        self.add_toast(f"🔄 Switching to profile '{profile}'...", ToastKind.INFO)
        state.is_loading = True

        state.identity = Identity(profile=profile, region=state.identity.region)
        logger.info("Activating profile %s and rebuilding cloud client", profile)

        task = activate_profile_task(self.bridge, self.client_factory, state.identity)
        self.spawn(task, "profile-activation")

    def check_async_notifications(self) -> None:
        """Apply every pending background notification, in arrival order."""
        for notification in self.bridge.drain():
            self.apply_notification(notification)

    def apply_notification(self, notification: Notification) -> None:
        state = self.state

        if isinstance(notification, SsoLoginSucceeded):
            self.add_toast("✅ Login successful! Activating profile...", ToastKind.SUCCESS)
            logger.log(SUCCESS, "%s: %s", notification.message, notification.profile)
            self.activate_profile(notification.profile)
        elif isinstance(notification, SsoLoginFailed):
            if SSO_CONFIG_MISSING_MARKER in notification.error:
                self.add_toast("❌ SSO Config Missing. Run 'aws configure sso'", ToastKind.ERROR)
                logger.error("SSO Config Error: %s", notification.error)
                state.status_message = "SSO Configuration Missing!"
            else:
                self.add_toast(f"❌ Login Failed: {notification.error}", ToastKind.ERROR)
                logger.error("Login failed: %s", notification.error)
        elif isinstance(notification, ProfileActivated):
            state.client = notification.client
            state.configured = True
            state.active_profile_name = notification.profile
            state.is_loading = False
            self.close_dialog()
            self.add_toast(f"✅ Active Profile: {notification.profile}", ToastKind.SUCCESS)
            self.refresh_data()
        elif isinstance(notification, ProfileActivationFailed):
            state.is_loading = False
            logger.error("Failed to switch profile: %s", notification.error)
            self.add_toast("Failed to switch profile", ToastKind.ERROR)
