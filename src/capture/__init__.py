from .screen_capture import ScreenCapture, capture_plan

__all__ = ["ScreenCapture", "capture_plan"]
