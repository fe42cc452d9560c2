# pylint: disable=wrong-import-position,redefined-outer-name
"""Root conftest for all Smellbot tests.

Points APPLICATION_YML_PATH at the example configuration before any module
imports trigger Settings loading.
"""
import os
from pathlib import Path

os.environ.setdefault(
    "APPLICATION_YML_PATH",
    str(Path(__file__).resolve().parents[1] / "application.example.yml"),
)

import pytest

from smellbot.comments.corpus import CommentCorpus


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def comment_dir(tmp_path):
    root = tmp_path / "comments" / "ruby"
    (root / "smell").mkdir(parents=True)
    (root / "smell" / "unused_variable.md").write_bytes(
        b"Consider removing unused variables."
    )
    (root / "style").mkdir()
    (root / "style" / "long_line.md").write_bytes(b"This line is quite long.")
    return root


@pytest.fixture
def corpus(comment_dir):
    return CommentCorpus.build(comment_dir)
