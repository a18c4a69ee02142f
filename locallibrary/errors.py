"""Error taxonomy for catalog lookups and storage.

Field validation failures and blocked deletes are ordinary results (see
``services``); only the conditions that terminate a request are exceptions.
"""


class CatalogError(Exception):
    """Base class for catalog errors."""


class NotFound(CatalogError):
    def __init__(self, entity, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found")


class InvalidIdentifier(NotFound):
    """The identifier cannot name any record (malformed)."""


class StorageFailure(CatalogError):
    def __init__(self, message, original=None):
        self.original = original
        super().__init__(message)
