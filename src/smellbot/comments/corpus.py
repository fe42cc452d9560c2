"""
In-memory corpus of pre-authored comments, keyed by smell identifier.

A comment stored at ``<root>/<type>/<key>.md`` answers the smell identifier
``<type>/<key>``. The corpus is built once at startup and never changes
afterwards, so it can be read from any number of workers without locking.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Union

from smellbot.common.logging_config import get_logger

logger = get_logger(__name__)


def corpus_root(comments_dir: Union[str, Path], track: str) -> Path:
    """Directory holding the comments of one track."""
    return Path(comments_dir) / track


def smell_id_for(path: Path, root: Path) -> str:
    """Derive the lookup key of a comment file, e.g. ``typeA/issue.md`` -> ``typeA/issue``."""
    relative = path.relative_to(root)
    return relative.with_suffix("").as_posix().lstrip("/")


class CommentCorpus(Mapping[str, bytes]):
    """Read-only mapping from smell identifier to raw comment content."""

    def __init__(self, comments: Optional[Mapping[str, bytes]] = None):
        self._comments = MappingProxyType(dict(comments or {}))

    @classmethod
    def build(cls, root_dir: Union[str, Path]) -> "CommentCorpus":
        """
        Walk ``root_dir`` recursively and load every regular file.

        Raises:
            FileNotFoundError: If ``root_dir`` does not exist.
            NotADirectoryError: If ``root_dir`` is not a directory.
            OSError: If a comment file cannot be read.
        """
        root = Path(root_dir)
        if not root.exists():
            raise FileNotFoundError(f"Comment directory not found at {root}.")
        if not root.is_dir():
            raise NotADirectoryError(f"Comment path {root} is not a directory.")

        comments: Dict[str, bytes] = {}
        sources: Dict[str, Path] = {}
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            key = smell_id_for(path, root)
            if not key:
                logger.warning("Ignoring comment file without a usable name: %s", path)
                continue
            content = path.read_bytes()
            if not content:
                logger.warning("Ignoring empty comment file: %s", path)
                continue
            if key in comments:
                logger.warning(
                    "Duplicate comment for %s: %s replaces %s", key, path, sources[key]
                )
            comments[key] = content
            sources[key] = path

        logger.info("Loaded %d comments from %s", len(comments), root)
        return cls(comments)

    def __getitem__(self, smell_id: str) -> bytes:
        return self._comments[smell_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._comments)

    def __len__(self) -> int:
        return len(self._comments)

    def __repr__(self) -> str:
        return f"CommentCorpus({len(self)} comments)"
