"""
Exception hierarchy shared by the engine and the storage adapters.
"""


class KitchenSheetError(Exception):
    """Base class for all errors raised by this package."""


class MalformedPayloadError(KitchenSheetError):
    """A stored or submitted item payload could not be parsed."""


class ProjectionStoreError(KitchenSheetError):
    """The projection could not be loaded or saved."""
