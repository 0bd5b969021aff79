"""Telegram bot command, upload, and callback handler modules."""

from __future__ import annotations

from .callbacks import build_callback_handlers
from .commands import build_command_handlers
from .upload import build_upload_handler

__all__ = [
    "build_callback_handlers",
    "build_command_handlers",
    "build_upload_handler",
]
