"""
lastseen: records when each player was last active and persists it to YAML.
"""

__version__ = "1.0.0"
