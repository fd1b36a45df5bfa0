"""A FIFO-fair blocking queue, an in-memory message slot store, and message slot device clients."""

__version__ = "0.1.0"
__all__ = ["__version__"]