"""
Exceptions raised by the external data collaborators.
"""


class CollaboratorError(Exception):
    """An upstream data source could not be queried or returned garbage"""

    source = "collaborator"

    def __init__(self, message: str, asn: int = None):
        super().__init__(message)
        self.message = message
        self.asn = asn

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"


class PrefixSourceError(CollaboratorError):
    source = "RIPEstat"


class PeeringDBError(CollaboratorError):
    source = "PeeringDB"


class GeolocationError(CollaboratorError):
    source = "ipinfo.io"
