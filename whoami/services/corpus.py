from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence
from urllib.parse import urlparse

import requests

from whoami.services.errors import LoadError
from whoami.services.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

NO_DATA_CONTEXT = "No documents available."
LOAD_ERROR_CONTEXT = "Error loading documents"


@dataclass(frozen=True)
class CorpusLoadResult:
    ok: bool
    text: str = ""
    error: str | None = None
    documents: int = 0


def is_url(locator: str) -> bool:
    return urlparse(locator).scheme in {"http", "https"}


def _document_name(locator: str) -> str:
    if is_url(locator):
        path = urlparse(locator).path
        return path.rsplit("/", 1)[-1] or locator
    return Path(locator).name or locator


def format_document(name: str, content: str) -> str:
    return f"--- {name} ---\n{content}"


class CorpusLoader:
    """Reads biography documents from a directory, local files or URLs."""

    def __init__(
        self,
        extensions: Sequence[str] | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if extensions is None:
            extensions = default_settings.corpus_extensions
        self._extensions: tuple[str, ...] = tuple(ext.lower() for ext in extensions)
        self._timeout = timeout or default_settings.corpus_timeout
        self._session = session or requests.Session()

    def from_directory(self, directory: str | os.PathLike[str]) -> str:
        """Concatenate every matching file in ``directory``.

        Never raises: an unreadable directory or one without matching files
        yields a placeholder string so the system prompt stays well-formed.
        """
        path = Path(directory)
        try:
            files = sorted(
                entry
                for entry in path.iterdir()
                if entry.is_file() and entry.suffix.lower() in self._extensions
            )
            if not files:
                logger.warning("No corpus documents found in %s", path)
                return (
                    "No documents found. Please add "
                    f"{' or '.join(self._extensions)} files to {path}"
                )
            documents = [
                format_document(file.name, file.read_text(encoding="utf-8"))
                for file in files
            ]
        except (OSError, UnicodeDecodeError):
            logger.exception("Error loading corpus directory %s", path)
            return LOAD_ERROR_CONTEXT

        logger.info("Loaded %d corpus documents from %s", len(documents), path)
        return "\n\n".join(documents)

    def from_urls(self, urls: Iterable[str]) -> CorpusLoadResult:
        """Fetch every URL; the first failure fails the whole batch."""
        documents: List[str] = []
        for url in urls:
            try:
                content = self._fetch(url)
            except LoadError as exc:
                return CorpusLoadResult(ok=False, error=str(exc))
            documents.append(format_document(_document_name(url), content))
        return self._joined(documents)

    def load(self, sources: Sequence[str]) -> CorpusLoadResult:
        """Load a mixed list of URLs, directories and files in input order.

        Directories degrade to a placeholder text; any URL or file that cannot
        be read fails the batch.
        """
        documents: List[str] = []
        for locator in sources:
            try:
                if is_url(locator):
                    documents.append(
                        format_document(_document_name(locator), self._fetch(locator))
                    )
                elif Path(locator).is_dir():
                    documents.append(self.from_directory(locator))
                else:
                    documents.append(
                        format_document(_document_name(locator), self._read(locator))
                    )
            except LoadError as exc:
                return CorpusLoadResult(ok=False, error=str(exc))
        return self._joined(documents)

    def _fetch(self, url: str) -> str:
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Failed to fetch corpus document %s: %s", url, exc)
            raise LoadError(f"Failed to fetch {url}: {exc}") from exc
        return response.text

    @staticmethod
    def _read(path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read corpus document %s: %s", path, exc)
            raise LoadError(f"Failed to read {path}: {exc}") from exc

    @staticmethod
    def _joined(documents: List[str]) -> CorpusLoadResult:
        if not documents:
            return CorpusLoadResult(ok=True, text=NO_DATA_CONTEXT)
        return CorpusLoadResult(
            ok=True, text="\n\n".join(documents), documents=len(documents)
        )


def load_corpus_context(
    config: Settings | None = None, loader: CorpusLoader | None = None
) -> str:
    """Build the corpus context for the running service.

    URL mode is used when ``CORPUS_URLS`` is configured and fails fast;
    otherwise the corpus directory is read and never fails.
    """
    config = config or default_settings
    loader = loader or CorpusLoader(
        extensions=config.corpus_extensions, timeout=config.corpus_timeout
    )
    if config.corpus_urls:
        result = loader.from_urls(config.corpus_urls)
        if not result.ok:
            raise LoadError(f"Failed to load data: {result.error}")
        logger.info("Loaded %d corpus documents from URLs", result.documents)
        return result.text
    return loader.from_directory(config.corpus_dir)
