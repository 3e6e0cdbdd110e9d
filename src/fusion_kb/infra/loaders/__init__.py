from .text_loader import TextFileLoader

__all__ = ["TextFileLoader"]
