"""
Test-case helpers for models and controllers
"""
from minimalizer.testing.controller_test_helpers import ControllerTestHelpers  # noqa: F401
from minimalizer.testing.model_test_helpers import ModelTestHelpers  # noqa: F401
