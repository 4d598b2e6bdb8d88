class StoreError(Exception):
    """The backing store failed (connection, SQL, driver...)"""


class NotFoundError(StoreError):
    """No record matches the lookup"""


class UniqueConstraintError(StoreError):
    """The write violates a uniqueness constraint"""
