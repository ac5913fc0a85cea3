from .logging import InteractionLoggingMiddleware

__all__ = ["InteractionLoggingMiddleware"]
