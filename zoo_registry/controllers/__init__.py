# Controllers package initialization
# This file makes the controllers directory a Python package
# and allows importing controller modules

from . import registration_controller

__all__ = [
    "registration_controller",
]
