"""Import scanner interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Union

from ..models import ImportCandidate


class IImportScanner(ABC):
    """Interface for discovering raw disk backups to import."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether an import root is configured."""
        pass

    @abstractmethod
    def list_candidates(self) -> List[ImportCandidate]:
        """List import candidates.

        Returns:
            Candidates sorted by name.

        Raises:
            SourceNotFoundError: If the import root is missing.
        """
        pass

    @abstractmethod
    def get_candidate(self, name_or_path: Union[str, Path]) -> ImportCandidate:
        """Resolve one candidate by directory name or path.

        Args:
            name_or_path: Directory name under the import root, or a path inside it.

        Returns:
            Freshly classified candidate.

        Raises:
            SourceNotFoundError: If the directory does not exist.
        """
        pass
