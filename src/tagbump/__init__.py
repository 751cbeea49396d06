"""tagbump - container image tag update resolution."""

__version__ = "0.1.0"
