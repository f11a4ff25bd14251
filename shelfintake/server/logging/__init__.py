from .record_payloads import format_price, record_to_loggable

__all__ = ["format_price", "record_to_loggable"]
