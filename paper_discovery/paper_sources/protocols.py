"""Protocol definitions for paper search providers."""

from typing import Protocol, runtime_checkable

from .models import Candidate


@runtime_checkable
class PaperSearchProvider(Protocol):
    """Protocol for paper search providers.

    Implement this protocol to add support for new paper search APIs.
    """

    name: str

    async def search(self, topic: str) -> list[Candidate]:
        """
        Search the provider for papers about ``topic``.

        Args:
            topic: Free-text topic as entered by the user. Providers add
                their own discipline keywords before querying.

        Returns:
            Candidates in provider order, normalized to PaperRecord.

        Raises:
            SourceUnavailable: if the provider cannot be reached or its
                response cannot be understood
        """
        ...

    async def __aenter__(self) -> "PaperSearchProvider":
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        ...
