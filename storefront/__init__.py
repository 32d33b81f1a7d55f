"""Warehouse storefront: public catalog and admin back-office service."""

__version__ = "0.1.0"
