"""Shared helpers for command execution and configuration loading."""
