"""DeliGo customer storefront: server-rendered pages over the marketplace API."""

__version__ = '1.0.0'
