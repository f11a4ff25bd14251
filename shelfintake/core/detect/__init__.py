from .text import UnsupportedFormatError, classify_line, detect_format, normalize_lines

__all__ = ["UnsupportedFormatError", "classify_line", "detect_format", "normalize_lines"]
