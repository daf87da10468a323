"""Provider Portal: profile wizard and publish service."""

__version__ = "0.1.0"
