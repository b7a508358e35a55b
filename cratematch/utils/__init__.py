"""Logging setup and library snapshot files."""
