"""Template lookup by logical name."""

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from jsont_core.config.models import DEFAULT_EXTENSION
from jsont_core.errors import create_error
from jsont_core.logging import TemplateLogger


@runtime_checkable
class TemplateLocator(Protocol):
    """Maps a logical template name to template text."""

    def find(self, name: str) -> str:
        """Return the text of the template called ``name``.

        Raises:
            TemplateNotFound: If there is no such template
        """
        ...


class FileSystemLocator:
    """Finds templates as files under a list of directories.

    The template ``pages/index`` is the file ``pages/index.html.jsont`` in the
    first directory that has it. Directories added later are searched first,
    so an application can shadow templates shipped with a library.
    """

    def __init__(
        self,
        paths: Iterable[str | Path] = (),
        extension: str = DEFAULT_EXTENSION,
        logger: TemplateLogger | None = None,
    ):
        """Initialize locator.

        Args:
            paths: Directories to search, in the order they are added
            extension: File name suffix appended to template names
            logger: Optional logger for lookup events
        """
        self._paths: list[Path] = []
        self.extension = extension
        self._logger = logger.locator() if logger else None
        for path in paths:
            self.add_path(path)

    @property
    def paths(self) -> list[Path]:
        """Directories in search order."""
        return list(self._paths)

    def add_path(self, path: str | Path) -> None:
        """Add a directory; it is searched before all directories added earlier."""
        self._paths.insert(0, Path(path))

    def get_path(self, name: str) -> Path:
        """Resolve a template name to a file path.

        Args:
            name: Logical template name, without extension

        Returns:
            Path of the first matching file

        Raises:
            TemplateNotFound: If name is empty or no directory has the file
        """
        if not name:
            raise create_error("TEMPLATE_NAME_REQUIRED")

        file_name = name + self.extension
        for directory in self._paths:
            candidate = directory / file_name
            if candidate.is_file():
                if self._logger:
                    self._logger.resolved(name, str(candidate))
                return candidate

        if self._logger:
            self._logger.missing(name)
        searched = ", ".join(str(p) for p in self._paths) or "<no paths>"
        raise create_error("TEMPLATE_NOT_FOUND", name=name, searched=searched)

    def find(self, name: str) -> str:
        """Read the template called ``name``."""
        return self.get_path(name).read_text(encoding="utf-8")
