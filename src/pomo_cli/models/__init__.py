"""Data models for Pomo CLI."""
