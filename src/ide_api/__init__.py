"""Workspace IDE API package."""
