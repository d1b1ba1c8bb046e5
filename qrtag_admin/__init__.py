"""Admin backend for the QR tag affiliate and sales platform."""

__version__ = "0.1.0"
