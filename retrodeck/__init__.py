"""RetroDeck companion dashboard for LaunchBox / BigBox."""

__version__ = "0.1.0"
