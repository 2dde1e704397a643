"""RH (return horizon) expiry tracking and WhatsApp notification engine."""

__version__ = "0.1.0"
