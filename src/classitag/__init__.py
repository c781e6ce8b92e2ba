"""
Summary: Classical album metadata extraction and normalization.
Why: Expose the package version for the CLI and the default User-Agent.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
