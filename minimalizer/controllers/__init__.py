"""
Controllers with CRUD response helpers
"""
from minimalizer.controllers.base import BaseController
from minimalizer.controllers.directives import (Chain, Redirect, Render,
                                                Single, polymorphic_path,
                                                resolve)
from minimalizer.controllers.helpers import DEFAULT_TEMPLATES, ControllerHelpers


class Controller(ControllerHelpers, BaseController):
    """Base class for application controllers"""


__all__ = [
    "BaseController",
    "Chain",
    "Controller",
    "ControllerHelpers",
    "DEFAULT_TEMPLATES",
    "Redirect",
    "Render",
    "Single",
    "polymorphic_path",
    "resolve",
]
