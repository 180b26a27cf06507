"""HTTP API for a mess management application: users, products, carts and orders in MongoDB."""

__version__ = "1.0.0"