"""
Policy model sources.

The code generator consumes an already-parsed policy model through the
PolicyModel protocol. This module ships two file-backed implementations
that load pre-parsed definition documents (YAML or JSON) and validate
them into Policy objects.
"""
import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union, runtime_checkable

import anyio
import yaml

from ..utils.cancellation import CancellationToken, ensure_token
from .models import Policy, PolicyDocument

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIXES = (".yaml", ".yml", ".json")


@runtime_checkable
class PolicyModel(Protocol):
    """What the renderer and orchestrator need from a policy model."""

    @property
    def loaded(self) -> bool: ...

    async def load(self, token: Optional[CancellationToken] = None) -> None: ...

    def query(self) -> Union[Policy, Sequence[Policy]]: ...


def read_document(path: Path) -> PolicyDocument:
    """Load and validate a single definition document."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if data is None:
        data = {}
    return PolicyDocument.model_validate(data)


class PolicyContent:
    """A single definition document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._document: Optional[PolicyDocument] = None

    @property
    def loaded(self) -> bool:
        return self._document is not None

    async def load(self, token: Optional[CancellationToken] = None) -> None:
        ensure_token(token).raise_if_cancelled()
        if not self.path.is_file():
            raise FileNotFoundError(f"'{self.path}' does not exist.")
        self._document = await anyio.to_thread.run_sync(read_document, self.path)
        logger.info("Loaded %d policies from %s", len(self._document.policies), self.path)

    @property
    def document(self) -> PolicyDocument:
        if self._document is None:
            raise RuntimeError("Please load the content model first.")
        return self._document

    def query(self) -> List[Policy]:
        return list(self.document.policies)


class PolicyDirectory:
    """
    Every definition document in a directory.

    Documents are read in file-name order and policies keep their
    declaration order, so the query result is stable across runs.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._documents: Optional[List[PolicyDocument]] = None

    @property
    def loaded(self) -> bool:
        return self._documents is not None

    def document_paths(self) -> List[Path]:
        return sorted(
            (p for p in self.path.iterdir() if p.is_file() and p.suffix.lower() in DOCUMENT_SUFFIXES),
            key=lambda p: p.name,
        )

    async def load(self, token: Optional[CancellationToken] = None) -> None:
        token = ensure_token(token)
        if not self.path.is_dir():
            raise NotADirectoryError(f"'{self.path}' is not a directory.")

        documents = []
        for path in self.document_paths():
            token.raise_if_cancelled()
            documents.append(await anyio.to_thread.run_sync(read_document, path))
            logger.debug("Loaded %s", path)

        self._documents = documents
        logger.info(
            "Loaded %d documents (%d policies) from %s",
            len(documents), sum(len(d.policies) for d in documents), self.path,
        )

    def query(self) -> List[Policy]:
        if self._documents is None:
            raise RuntimeError("Please load the directory model first.")
        return [policy for document in self._documents for policy in document.policies]


def open_policy_model(path: Union[str, Path]) -> Union[PolicyContent, PolicyDirectory]:
    """Pick the directory or single-document model for an input path."""
    path = Path(path)
    if path.is_dir():
        return PolicyDirectory(path)
    if path.is_file():
        return PolicyContent(path)
    raise FileNotFoundError(f"Invalid input path: '{path}'")
