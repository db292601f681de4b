# tests/test_storage.py
import json
from pathlib import Path

import pytest

from execledger.storage import (
    ArtifactStore,
    CHAIN_ARTIFACT,
    DirectoryStore,
    create_storage,
)


@pytest.fixture
def store(tmp_path: Path) -> DirectoryStore:
    return DirectoryStore(tmp_path / "provenance")


def test_create_storage_dynamic_routing(tmp_path: Path):
    storage = create_storage(f"dir://{tmp_path}")
    assert isinstance(storage, DirectoryStore)
    assert isinstance(storage, ArtifactStore)
    assert storage.root == tmp_path.resolve()


def test_create_storage_plain_path(tmp_path: Path):
    storage = create_storage(str(tmp_path / "artifacts"))
    assert storage.root == (tmp_path / "artifacts").resolve()


@pytest.mark.parametrize("uri", ["", "s3://bucket/key", "sqlite://ledger.db"])
def test_create_storage_rejects_unknown(uri):
    with pytest.raises(ValueError):
        create_storage(uri)


def test_write_creates_directory_and_pretty_json(store: DirectoryStore):
    store.save_chain({"chain_id": "c-1", "events": []})
    path = store.root / CHAIN_ARTIFACT
    assert path.exists()
    text = path.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert '  "chain_id": "c-1"' in text
    assert store.load_chain() == {"chain_id": "c-1", "events": []}


def test_named_artifacts(store: DirectoryStore):
    store.save_certificate({"chain_id": "c-1"})
    store.save_public_key({"algorithm": "Ed25519"})
    store.save_verification_result({"verified": True})
    assert store.list_artifacts() == [
        "certificate.json",
        "public-key.json",
        "verification-result.json",
    ]
    assert store.load_public_key() == {"algorithm": "Ed25519"}
    assert store.load_certificate() == {"chain_id": "c-1"}


def test_read_missing_artifact(store: DirectoryStore):
    assert store.exists(CHAIN_ARTIFACT) is False
    assert store.list_artifacts() == []
    with pytest.raises(FileNotFoundError):
        store.load_chain()


def test_artifact_names_cannot_escape_root(store: DirectoryStore):
    with pytest.raises(ValueError):
        store.write("../outside.json", {})


def test_unicode_preserved(store: DirectoryStore):
    store.write("note.json", {"name": "Zoë"})
    assert "Zoë" in (store.root / "note.json").read_text(encoding="utf-8")
    assert json.loads((store.root / "note.json").read_text(encoding="utf-8")) == {"name": "Zoë"}
