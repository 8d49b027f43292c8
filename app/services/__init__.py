"""
Services Layer

Business logic on top of the product store and the image host.
"""

__all__ = []
