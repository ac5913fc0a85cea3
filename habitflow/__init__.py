"""HabitFlow: daily habit tracker with photo proof and Gemini-powered hints."""

__version__ = "0.1.0"
