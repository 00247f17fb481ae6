"""Command-line interface for Hazard Certifier."""
