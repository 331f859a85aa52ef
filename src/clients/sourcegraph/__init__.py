from .client import SourcegraphClient

__all__ = ["SourcegraphClient"]
