"""Multi-profile, multi-region EC2 instance address discovery."""

__version__ = "0.1.0"
