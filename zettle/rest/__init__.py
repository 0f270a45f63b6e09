"""REST transport for the Zettle API."""

from zettle.rest.client import HttpxRestClient, RestClientInterface

__all__ = ["HttpxRestClient", "RestClientInterface"]
