"""
Tray-resident application: one credential window, opened by hotkey or tray.
"""

from __future__ import annotations
import logging
from typing import Optional

from PyQt6.QtWidgets import QApplication, QSystemTrayIcon, QMenu, QStyle

from ..config import AppSettings
from .errors import StoreUnavailable
from .hotkey import GlobalHotkey
from .manager_ui import CredentialManagerWindow, ManagerTheme
from .store import CredentialStore

logger = logging.getLogger(__name__)


class AppContext:
    """
    Owns the single credential window.

    The window is created on the first open request; later requests
    re-show, raise and refresh the same instance.
    """

    def __init__(
        self,
        settings: AppSettings,
        store: CredentialStore = None,
        theme: ManagerTheme = None,
    ):
        self.settings = settings
        if theme is None:
            try:
                theme = ManagerTheme.from_dict(settings.theme)
            except ValueError as e:
                logger.error(f"Bad theme settings, using defaults: {e}")
                theme = ManagerTheme()
        self.theme = theme
        self.window: Optional[CredentialManagerWindow] = None
        self.unavailable_reason = ""

        if store is None:
            try:
                store = CredentialStore(prefix=settings.prefix, persist=settings.persist)
            except StoreUnavailable as e:
                logger.error(f"Credential store unavailable: {e}")
                self.unavailable_reason = str(e)
        self.store = store

    def show_manager(self) -> CredentialManagerWindow:
        """Open the credential window, or bring the existing one forward."""
        if self.window is None:
            logger.debug("Creating credential window")
            self.window = CredentialManagerWindow(
                self.store,
                theme=self.theme,
                unavailable_reason=self.unavailable_reason,
                width=self.settings.window_width,
                height=self.settings.window_height,
            )
        else:
            self.window.refresh()

        self.window.show()
        self.window.raise_()
        self.window.activateWindow()
        return self.window


class TrayApp:
    """System tray icon plus global hotkey wired to an AppContext."""

    def __init__(self, app: QApplication, context: AppContext):
        self.app = app
        self.context = context

        try:
            self.hotkey = GlobalHotkey(context.settings.hotkey)
            self.hotkey.activated.connect(context.show_manager)
        except ValueError as e:
            logger.error(f"Hotkey disabled: {e}")
            self.hotkey = None

        icon = app.style().standardIcon(QStyle.StandardPixmap.SP_DialogSaveButton)
        self.tray = QSystemTrayIcon(icon)
        self.tray.setToolTip("Credential Manager")
        self.tray.activated.connect(self._on_tray_activated)

        menu = QMenu()
        menu.addAction("Open", context.show_manager)
        menu.addSeparator()
        menu.addAction("Quit", self.quit)
        self.tray.setContextMenu(menu)
        self._menu = menu

    def start(self) -> None:
        if QSystemTrayIcon.isSystemTrayAvailable():
            self.tray.show()
        else:
            logger.warning("No system tray available")

        if self.hotkey and self.hotkey.register(self.app):
            self.tray.setToolTip(f"Credential Manager ({self.hotkey.text})")

        # Nothing to bring the window back without tray or hotkey
        if not self.tray.isVisible() and not (self.hotkey and self.hotkey.is_registered):
            logger.info("No tray or hotkey - closing the window will quit")
            self.app.setQuitOnLastWindowClosed(True)
            self.context.show_manager().hide_on_close = False

    def _on_tray_activated(self, reason):
        if reason in (
            QSystemTrayIcon.ActivationReason.Trigger,
            QSystemTrayIcon.ActivationReason.DoubleClick,
        ):
            self.context.show_manager()

    def quit(self) -> None:
        if self.hotkey:
            self.hotkey.unregister(self.app)
        self.tray.hide()
        self.app.quit()


def run(settings: AppSettings, show: bool = False) -> int:
    """Run the tray application until Quit. Returns the exit code."""
    import sys

    app = QApplication(sys.argv)
    app.setStyle("Fusion")
    app.setQuitOnLastWindowClosed(False)

    context = AppContext(settings)
    tray = TrayApp(app, context)
    tray.start()

    if show or settings.show_on_start:
        context.show_manager()

    return app.exec()
