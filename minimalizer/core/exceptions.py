"""
Exception types raised by the controller and model helpers
"""


class MinimalizerError(Exception):
    """Base class for all helper errors"""


class ConfigurationError(MinimalizerError):
    """Raised when a helper is called in a way that can never succeed.

    These indicate a programming mistake in the calling controller (for
    example a bulk update with no records and no redirect location), not a
    runtime condition, so they are never translated into a response.
    """


class UnknownAttributeError(MinimalizerError):
    """Raised when assigning an attribute the model does not define"""

    def __init__(self, model_name: str, attribute: str):
        self.model_name = model_name
        self.attribute = attribute
        super().__init__(f"unknown attribute '{attribute}' for {model_name}")


class DetachedResourceError(ConfigurationError):
    """Raised when a model is saved or destroyed without a database session"""


class RecordNotFound(MinimalizerError, LookupError):
    """Raised when a collection has no record with the requested id"""

    def __init__(self, model_name: str, record_id):
        self.model_name = model_name
        self.record_id = record_id
        super().__init__(f"Couldn't find {model_name} with id={record_id}")
