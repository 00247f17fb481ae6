"""Hazard Certifier: hazard-declaration compliance analysis for device firmware."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
