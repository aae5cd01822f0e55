import sys

import pytest

pytest.importorskip("PyQt6.QtCore")

from credvault.vault.hotkey import (
    GlobalHotkey, Hotkey, MOD_ALT, MOD_CONTROL, MOD_SHIFT, MOD_WIN, parse_hotkey,
)


def test_parse_default_hotkey():
    assert parse_hotkey("Ctrl+Alt+K") == Hotkey(MOD_CONTROL | MOD_ALT, ord("K"))


def test_parse_is_case_and_space_insensitive():
    assert parse_hotkey(" shift + win + p ") == Hotkey(MOD_SHIFT | MOD_WIN, ord("P"))


def test_parse_function_keys():
    assert parse_hotkey("Ctrl+F1").vk == 0x70
    assert parse_hotkey("Ctrl+F12").vk == 0x7B


def test_parse_digit_and_named_keys():
    assert parse_hotkey("Alt+7").vk == ord("7")
    assert parse_hotkey("Ctrl+Space").vk == 0x20


@pytest.mark.parametrize("text", ["Ctrl+Alt", "Ctrl++K", "Ctrl+K+L", "Ctrl+Banana", "F99"])
def test_parse_rejects_bad_hotkeys(text):
    with pytest.raises(ValueError):
        parse_hotkey(text)


@pytest.mark.skipif(sys.platform == "win32", reason="registers a real hotkey on Windows")
def test_register_is_a_no_op_off_windows(qapp):
    hotkey = GlobalHotkey("Ctrl+Alt+K")
    assert hotkey.register(qapp) is False
    assert not hotkey.is_registered
    hotkey.unregister(qapp)
