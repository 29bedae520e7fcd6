"""Target capability negotiation and deployment device registry."""

__version__ = "0.1.0"
