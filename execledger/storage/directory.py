# execledger/storage/directory.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from . import ArtifactStore

logger = logging.getLogger(__name__)


class DirectoryStore(ArtifactStore):
    """One pretty-printed JSON file per artifact inside a directory (e.g. ./provenance)."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def path_for(self, name: str) -> Path:
        if Path(name).name != name:
            raise ValueError(f"Artifact name must be a plain file name: {name!r}")
        return self.root / name

    def write(self, name: str, data: Dict[str, Any]) -> None:
        # Ensure the entire parent directory tree exists
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.debug("wrote %s", path)

    def read(self, name: str) -> Dict[str, Any]:
        path = self.path_for(name)
        if not path.exists():
            raise FileNotFoundError(f"Artifact not found: {path}")
        return json.loads(path.read_text(encoding="utf-8"))

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def list_artifacts(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.glob("*.json"))

    def __repr__(self) -> str:
        return f"DirectoryStore({str(self.root)!r})"
