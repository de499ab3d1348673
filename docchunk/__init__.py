"""Structure-aware chunking of hierarchical documents for retrieval."""

__version__ = "1.0.0"
