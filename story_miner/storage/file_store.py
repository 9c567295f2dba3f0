"""
File-based document source and report writer

CLI 使用：從 JSONL 讀入 Document，並將分析結果寫成 JSON。
"""

import json
from typing import Any, List
from pathlib import Path
import logging

from pydantic import BaseModel

from story_miner.models import Document

logger = logging.getLogger(__name__)


class FileStore:
    """檔案儲存後端"""

    def __init__(self, base_dir: str = "out"):
        """
        初始化 FileStore

        Args:
            base_dir: 報表輸出目錄
        """
        self.base_dir = Path(base_dir)

    def read_documents(self, path: str) -> List[Document]:
        """
        讀取 documents (JSONL格式，每行一篇)

        空白行略過；欄位不符時拋出 pydantic ValidationError。
        """
        file_path = Path(path)

        documents = []
        with open(file_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                documents.append(Document(**json.loads(line)))

        logger.info(f"Read {len(documents)} documents: {file_path}")
        return documents

    def save_documents(self, documents: List[Document], name: str) -> Path:
        """寫入 documents (JSONL格式)"""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        file_path = self.base_dir / name

        with open(file_path, 'w', encoding='utf-8') as f:
            for doc in documents:
                f.write(json.dumps(doc.model_dump(mode='json'), ensure_ascii=False) + '\n')

        logger.info(f"Written {len(documents)} documents: {file_path}")
        return file_path

    def save_report(self, data: Any, name: str) -> Path:
        """寫入分析結果 (JSON格式)"""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        file_path = self.base_dir / name

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(_to_jsonable(data), f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Written report: {file_path}")
        return file_path


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode='json')
    if isinstance(data, dict):
        return {key: _to_jsonable(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_to_jsonable(value) for value in data]
    return data
