"""Administrative dashboard for per-city margin rosters backed by a webhook service."""

__version__ = "1.0.0"
