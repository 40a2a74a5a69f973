"""
Command-line entry points.

Provides command-line interfaces for:
- Scenario replay
"""
