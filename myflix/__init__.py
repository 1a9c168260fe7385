"""myFlix - movie catalog API with user accounts and favorites."""

__version__ = "1.0.0"
