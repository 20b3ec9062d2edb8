"""
Exceptions raised by the Play Store client.
"""


class ApiError(Exception):
    """A publisher API call failed or one of its preconditions did not hold."""
