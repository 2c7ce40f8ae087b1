from __future__ import annotations

import copy
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
Query = Optional[Dict[str, Any]]

# Kinds every installation knows about, even before the first record exists.
DEFAULT_MODEL_NAMES = ("tenant", "user")


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"yaml", "yml"}:
        return "yaml"
    return "json"


def _yaml():
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError(
            "YAML store requested but PyYAML is not available. "
            "Use a .json store path or install the 'yaml' extra."
        ) from e
    return yaml


def read_document_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}

    text = path.read_text(encoding="utf-8")
    if _detect_format(path) == "yaml":
        data = _yaml().safe_load(text) or {}
    else:
        data = json.loads(text) if text.strip() else {}

    if not isinstance(data, dict):
        raise ValueError(f"Store file must contain an object/dict, got {type(data)}")
    return data


def write_document_file(path: Path, data: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if _detect_format(path) == "yaml":
        path.write_text(_yaml().safe_dump(data, sort_keys=False) + "\n", encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _matches(doc: Document, query: Query) -> bool:
    if not query:
        return True
    return all(doc.get(k) == v for k, v in query.items())


class DocumentStore:
    """A small collection store persisted to a single JSON (or YAML) file.

    Collections are keyed by model name. Every mutation is written through to
    disk before the call returns.
    """

    def __init__(self, path: str | Path, *, model_names: Iterable[str] = DEFAULT_MODEL_NAMES) -> None:
        self.path = Path(path)
        self._registered = list(model_names)
        self._collections: Dict[str, List[Document]] = {}
        self._opened = False

    def open(self) -> None:
        data = read_document_file(self.path)
        self._collections = {str(k): list(v or []) for k, v in data.items()}
        for name in self._registered:
            self._collections.setdefault(name, [])
        self._opened = True
        logger.info("Opened document store %s (%d kinds)", self.path, len(self._collections))

    @property
    def is_open(self) -> bool:
        return self._opened

    def _require_open(self) -> None:
        if not self._opened:
            raise RuntimeError(f"Document store {self.path} is not open")

    def _flush(self) -> None:
        write_document_file(self.path, self._collections)

    def register_model(self, name: str) -> None:
        if name not in self._registered:
            self._registered.append(name)
        if self._opened:
            self._collections.setdefault(name, [])

    def model_names(self) -> List[str]:
        """Every resource kind the store knows about right now."""
        self._require_open()
        return sorted(self._collections)

    def find(self, model: str, query: Query = None) -> List[Document]:
        self._require_open()
        return [copy.deepcopy(d) for d in self._collections.get(model, []) if _matches(d, query)]

    def find_one(self, model: str, query: Query = None) -> Optional[Document]:
        found = self.find(model, query)
        return found[0] if found else None

    def create(self, model: str, doc: Document) -> Document:
        self._require_open()
        record = copy.deepcopy(doc)
        record.setdefault("_id", uuid.uuid4().hex)
        self._collections.setdefault(model, []).append(record)
        self._flush()
        logger.debug("Created %s %s", model, record["_id"])
        return copy.deepcopy(record)

    def update(self, model: str, query: Query, changes: Document) -> int:
        self._require_open()
        n = 0
        for d in self._collections.get(model, []):
            if _matches(d, query):
                d.update(copy.deepcopy(changes))
                n += 1
        if n:
            self._flush()
        return n

    def destroy(self, model: str, query: Query = None) -> int:
        """Delete matching records; a None query deletes the whole kind."""
        self._require_open()
        docs = self._collections.get(model, [])
        keep = [d for d in docs if not _matches(d, query)]
        n = len(docs) - len(keep)
        self._collections[model] = keep
        if n:
            self._flush()
            logger.info("Destroyed %d %s record(s)", n, model)
        return n
