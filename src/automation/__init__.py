from __future__ import annotations

__all__ = ["GlobalHotkeyListener", "format_bind_for_display", "normalize_bind"]


def __getattr__(name: str):
    if name in __all__:
        from . import global_hotkey

        return getattr(global_hotkey, name)
    raise AttributeError(name)
