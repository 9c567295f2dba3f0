"""
Tests for the JSONL document store
"""

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from story_miner.models import Document, Topic
from story_miner.storage.file_store import FileStore


def test_read_documents_skips_blank_lines(tmp_path):
    """測試讀取 JSONL 並略過空白行"""
    path = tmp_path / "corpus.jsonl"
    path.write_text(
        '{"id": 1, "content": "story one", "category": "World", "published_at": "2026-02-01T08:00:00Z"}\n'
        '\n'
        '{"id": 2, "content": "story two", "category": "Sports", "publisher": "BBC"}\n',
        encoding="utf-8"
    )

    documents = FileStore(str(tmp_path)).read_documents(str(path))

    assert [d.id for d in documents] == [1, 2]
    assert documents[0].published_at == datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)
    assert documents[1].publisher == "BBC"


def test_read_documents_rejects_malformed(tmp_path):
    path = tmp_path / "bad.jsonl"
    path.write_text('{"id": 1, "content": "no category"}\n', encoding="utf-8")

    with pytest.raises(ValidationError):
        FileStore(str(tmp_path)).read_documents(str(path))


def test_save_report(tmp_path):
    """測試將 pydantic 物件寫成 JSON"""
    store = FileStore(str(tmp_path / "out"))
    doc = Document(id=1, content="story", category="World")
    topics = [Topic(name="election", count=1, documents=[doc])]

    path = store.save_report(topics, "topics.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[0]["name"] == "election"
    assert data[0]["trend"] == "stable"
    assert data[0]["documents"][0]["id"] == 1


def test_save_documents_can_be_read_back(tmp_path):
    store = FileStore(str(tmp_path))
    docs = [Document(id=1, content="story", category="World", published_at="2026-02-01T08:00:00Z")]

    path = store.save_documents(docs, "docs.jsonl")

    assert store.read_documents(str(path)) == docs
