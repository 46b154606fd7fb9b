"""Empower Journey - lesson progress, badges, and prerequisite gating."""

__version__ = "0.1.0"
