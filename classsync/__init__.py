"""ClassSync: class schedule import and shared free-time engine."""

__version__ = "0.1.0"
