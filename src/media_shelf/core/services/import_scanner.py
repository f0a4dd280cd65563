"""Import scanner service implementation."""

from pathlib import Path
from typing import List, Optional, Union

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import SourceNotFoundError, get_directory_size, guess_title, is_hidden_file
from ..interfaces import IDiskClassifier, IImportScanner
from ..models import ImportCandidate


class ImportScanner(IImportScanner, LoggerMixin):
    """Lists raw disk backups waiting in the import directory."""

    def __init__(self, config: Config, classifier: IDiskClassifier) -> None:
        """Initialize import scanner.

        Args:
            config: Application configuration.
            classifier: Disk format classifier.
        """
        self._import_dir: Optional[Path] = config.catalog.import_dir
        self._classifier = classifier

    @property
    def enabled(self) -> bool:
        """Whether an import root is configured."""
        return self._import_dir is not None

    def list_candidates(self) -> List[ImportCandidate]:
        """List import candidates.

        Returns:
            Candidates sorted by name.

        Raises:
            SourceNotFoundError: If the import root is missing.
        """
        root = self._require_root()
        candidates = []
        for child in sorted(root.iterdir()):
            if child.is_dir() and not is_hidden_file(child):
                candidates.append(self._build_candidate(child))

        self.logger.info(f"Found {len(candidates)} import candidates in {root}")
        return candidates

    def get_candidate(self, name_or_path: Union[str, Path]) -> ImportCandidate:
        """Resolve one candidate by directory name or path.

        Args:
            name_or_path: Directory name under the import root, or a path inside it.

        Returns:
            Freshly classified candidate.

        Raises:
            SourceNotFoundError: If the directory does not exist.
        """
        root = self._require_root()
        path = Path(name_or_path)
        if not path.is_absolute():
            path = root / path

        if path.parent.resolve() != root.resolve():
            raise SourceNotFoundError(f"Not an import candidate: {name_or_path}")
        if not path.is_dir() or is_hidden_file(path):
            raise SourceNotFoundError(f"Import source not found: {path}")

        return self._build_candidate(path)

    def _require_root(self) -> Path:
        if self._import_dir is None:
            raise SourceNotFoundError("Import directory is not configured")
        if not self._import_dir.is_dir():
            raise SourceNotFoundError(f"Import directory does not exist: {self._import_dir}")
        return self._import_dir

    def _build_candidate(self, path: Path) -> ImportCandidate:
        title, year = guess_title(path.name)
        return ImportCandidate(
            name=path.name,
            path=path,
            detected_format=self._classifier.classify(path),
            title_guess=title,
            year_guess=year,
            size_bytes=get_directory_size(path),
        )
