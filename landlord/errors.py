"""
Exceptions raised by landlord.

Every failure a sweep or an eviction can run into is a LandlordError. The
underlying cause (Kubernetes API error, Azure SDK error, timeout, ...) is
chained with ``raise ... from ...`` so nothing is lost when the error is
logged.
"""


class LandlordError(Exception):
    """Base class for all landlord errors."""


class ListNodesError(LandlordError):
    """The cluster's nodes could not be listed. Aborts the current sweep."""


class ResourceIdError(LandlordError, ValueError):
    """A node's provider ID is not a Virtual Machine Scale Set VM ID."""


class EvictionError(LandlordError):
    """The eviction request for a single node failed."""


class ResponseReadError(EvictionError):
    """The eviction request succeeded but its response body was unreadable."""


def describe(err: BaseException) -> str:
    """
    Render an exception and its chain of causes on a single line.

    Example: "error evicting node-1: eviction deadline of 10s exceeded"

    :param err: The outermost exception.
    :type err: BaseException
    :return: str
    """
    messages = []
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        message = str(err)
        messages.append(message if message else type(err).__name__)
        err = err.__cause__
    return ": ".join(messages)
