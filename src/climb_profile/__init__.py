"""Climb Profile - gradient-colored elevation profiles for GPX tracks."""

__version_date__ = "2026-10-18"
