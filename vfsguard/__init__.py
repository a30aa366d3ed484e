"""Permission-enforcing, metadata-caching wrapper for filesystem backends."""

__version__ = "0.1.0"

__all__ = ["errors", "types", "userctx", "filesystem"]