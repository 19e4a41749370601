"""
Application version, reported on startup, in GET / and in the OpenAPI docs.

Bump MINOR for each release deployed to the LINE channel.
"""

__version__ = "0.1"
