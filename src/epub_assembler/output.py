"""Output files that only appear at their destination once complete."""

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


class AtomicFile:
    """A writable file that is renamed into place on commit.

    Data is written to a temporary file in the destination directory.
    ``commit`` moves it to the destination; ``discard`` deletes it. Until
    commit, nothing exists at the destination path.

    Example:
        with AtomicFile(Path("book.epub")) as out:
            out.file.write(data)
            out.commit()
    """

    def __init__(self, destination: str | os.PathLike):
        """Create the temporary file next to the destination.

        Args:
            destination: Final path of the file

        Raises:
            OSError: If the temporary file cannot be created
        """
        self.destination = Path(destination)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.destination.name}.",
            suffix=".tmp",
            dir=self.destination.parent,
        )
        self.temp_path = Path(tmp_name)
        self._file = os.fdopen(fd, "w+b")
        self._done = False
        logger.debug(f"Writing {self.destination} via {self.temp_path}")

    @property
    def file(self) -> BinaryIO:
        """The temporary binary file."""
        return self._file

    def commit(self) -> Path:
        """Flush the temporary file to disk and rename it into place.

        Returns:
            The destination path

        Raises:
            OSError: If flushing or renaming fails; the temporary file is
                removed in that case
        """
        if self._done:
            raise ValueError(f"{self.destination} already committed or discarded")
        try:
            self._file.flush()
            os.fsync(self._file.fileno())
            self._file.close()
            os.replace(self.temp_path, self.destination)
        except OSError:
            self.discard()
            raise
        self._done = True
        logger.debug(f"Committed {self.destination}")
        return self.destination

    def discard(self) -> None:
        """Close and delete the temporary file. Safe to call repeatedly."""
        if self._done:
            return
        self._done = True
        try:
            self._file.close()
        finally:
            self.temp_path.unlink(missing_ok=True)
        logger.debug(f"Discarded temporary file {self.temp_path}")

    def __enter__(self) -> "AtomicFile":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        # Anything not committed by now is abandoned
        self.discard()
