"""Lead intake backend for the Clyra Overseas website."""

__version__ = "1.0.0"
