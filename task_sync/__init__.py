"""
Task Sync: task and event synchronization with GitHub, Apple Reminders and
Apple Calendar for a note-taking host application.
"""

__version__ = "0.1.0"
