"""
ABC Retail Storage Console

Browser console over the Azure Storage resources of the ABC Retail store:
customer profiles (tables), product images (blobs), contracts (file share)
and order events (queue).
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
