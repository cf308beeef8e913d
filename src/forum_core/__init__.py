"""Forum access and interaction core."""

__version__ = "0.1.0"
