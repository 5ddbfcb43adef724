"""Mentor proxy service for the career-mentoring application."""

__version__ = "0.1.0"
