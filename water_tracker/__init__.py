"""
Water Tracker - Source Package

A small personal hydration tracker: log water against a daily goal,
keep state in a local key-value store, and mirror it to a paired device.

DESIGN PRINCIPLES:
1. One owner of tracker state per process
2. Every mutation ends with persist, then replicate
3. Persistence and replication failures never reach the user
4. Storage and replication backends are swappable
"""

__version__ = "1.0.0"
__author__ = "Water Tracker Team"
