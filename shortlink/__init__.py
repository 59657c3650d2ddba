"""Link shortener service: short codes for long URLs with visit counting."""

__version__ = "1.0.0"
