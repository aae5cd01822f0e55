"""
System-wide hotkey that brings up the credential window.

Windows only: the key is registered with RegisterHotKey and the WM_HOTKEY
message is picked out of Qt's native event stream. On other platforms
register() reports failure and the tray icon is the way in.
"""

from __future__ import annotations
import ctypes
import logging
import sys
from typing import NamedTuple

from PyQt6.QtCore import QObject, QAbstractNativeEventFilter, pyqtSignal

logger = logging.getLogger(__name__)

WM_HOTKEY = 0x0312

MOD_ALT = 0x0001
MOD_CONTROL = 0x0002
MOD_SHIFT = 0x0004
MOD_WIN = 0x0008
MOD_NOREPEAT = 0x4000

_MODIFIERS = {
    "alt": MOD_ALT,
    "ctrl": MOD_CONTROL,
    "control": MOD_CONTROL,
    "shift": MOD_SHIFT,
    "win": MOD_WIN,
    "meta": MOD_WIN,
}

_NAMED_KEYS = {
    "space": 0x20,
    "insert": 0x2D,
    "delete": 0x2E,
    "home": 0x24,
    "end": 0x23,
    "pageup": 0x21,
    "pagedown": 0x22,
}


class Hotkey(NamedTuple):
    modifiers: int
    vk: int


def parse_hotkey(text: str) -> Hotkey:
    """
    Parse "Ctrl+Alt+K" style text into RegisterHotKey arguments.

    Raises:
        ValueError: Unknown key, or no non-modifier key
    """
    modifiers = 0
    vk = None

    for part in (p.strip().lower() for p in text.split("+")):
        if not part:
            raise ValueError(f"Malformed hotkey '{text}'")
        if part in _MODIFIERS:
            modifiers |= _MODIFIERS[part]
            continue
        if vk is not None:
            raise ValueError(f"Hotkey '{text}' has more than one key")

        if len(part) == 1 and part.isalnum():
            vk = ord(part.upper())
        elif part[0] == "f" and part[1:].isdigit() and 1 <= int(part[1:]) <= 24:
            vk = 0x70 + int(part[1:]) - 1
        elif part in _NAMED_KEYS:
            vk = _NAMED_KEYS[part]
        else:
            raise ValueError(f"Unknown key '{part}' in hotkey '{text}'")

    if vk is None:
        raise ValueError(f"Hotkey '{text}' needs a key besides modifiers")
    return Hotkey(modifiers, vk)


class _HotkeyFilter(QAbstractNativeEventFilter):
    def __init__(self, hotkey_id: int, callback):
        super().__init__()
        self._hotkey_id = hotkey_id
        self._callback = callback

    def nativeEventFilter(self, event_type, message):
        if event_type == b"windows_generic_MSG":
            from ctypes import wintypes

            msg = wintypes.MSG.from_address(int(message))
            if msg.message == WM_HOTKEY and msg.wParam == self._hotkey_id:
                self._callback()
                return True, 0
        return False, 0


class GlobalHotkey(QObject):
    """
    Registers one global hotkey for the lifetime of the application.

    Signals:
        activated: The hotkey was pressed
    """

    activated = pyqtSignal()

    HOTKEY_ID = 0xC0DE

    def __init__(self, text: str, parent: QObject = None):
        super().__init__(parent)
        self.text = text
        self.hotkey = parse_hotkey(text)
        self._filter = None
        self._registered = False

    @property
    def is_registered(self) -> bool:
        return self._registered

    def register(self, app) -> bool:
        """
        Register with the OS and hook app's native event stream.

        Returns:
            True if the hotkey is live
        """
        if sys.platform != "win32":
            logger.info(f"Global hotkey {self.text} not supported on {sys.platform}")
            return False

        user32 = ctypes.windll.user32
        ok = user32.RegisterHotKey(
            None, self.HOTKEY_ID, self.hotkey.modifiers | MOD_NOREPEAT, self.hotkey.vk
        )
        if not ok:
            logger.warning(f"Could not register hotkey {self.text} (already in use?)")
            return False

        self._filter = _HotkeyFilter(self.HOTKEY_ID, self.activated.emit)
        app.installNativeEventFilter(self._filter)
        self._registered = True
        logger.info(f"Registered global hotkey {self.text}")
        return True

    def unregister(self, app) -> None:
        if not self._registered:
            return
        app.removeNativeEventFilter(self._filter)
        ctypes.windll.user32.UnregisterHotKey(None, self.HOTKEY_ID)
        self._filter = None
        self._registered = False
        logger.debug(f"Unregistered global hotkey {self.text}")
