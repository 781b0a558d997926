"""rebound - retry a command with a pluggable backoff algorithm"""

__version__ = "0.1.0"
