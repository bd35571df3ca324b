# src/version.py — v1
"""Package version and the oldest CLI version a GUI front-end accepts."""

__version__ = "1.0.0"
MINIMUM_GUI_VERSION = "1.0.0"
