# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import registration_service

__all__ = [
    "registration_service",
]
