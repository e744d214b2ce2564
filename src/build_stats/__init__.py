"""Build history statistics for CI providers.

Fetches build history from AppVeyor and TravisCI, normalizes it into a
common Build record and computes simple duration metrics over it.
"""

__version__ = "0.1.0"
