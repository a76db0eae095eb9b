"""Local file secret backend."""

from .file_storage import FileStorage

__all__ = ["FileStorage"]
