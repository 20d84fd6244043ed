"""Authenticated REST gateway for a container engine and the systemd user manager."""

__version__ = "0.1.0"
