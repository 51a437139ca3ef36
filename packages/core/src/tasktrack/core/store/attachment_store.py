"""AttachmentStore 本地文件系统实现

文件按内容 SHA-256 命名写入 uploads 目录，返回可访问 URL。
核心只读取返回结果中的 url，原始文件名由调用方回填。
"""

import asyncio
import hashlib
import mimetypes
from pathlib import Path

from pydantic import BaseModel, Field


def compute_hash_and_size(content: bytes) -> tuple[str, int]:
    """计算 SHA-256 hash 和内容大小

    Args:
        content: 原始内容字节

    Returns:
        (sha256_hex, size_bytes) 元组
    """
    return hashlib.sha256(content).hexdigest(), len(content)


class StoredFile(BaseModel):
    """上传结果"""

    url: str = Field(description="文件访问 URL")
    storage_ref: str = Field(default="", description="存储引用路径")
    size: int = Field(default=0, description="内容大小（字节）")
    hash: str = Field(default="", description="SHA-256 哈希")


class LocalAttachmentStore:
    """AttachmentStore 的本地文件系统实现"""

    def __init__(self, uploads_dir: Path, base_url: str = "/uploads") -> None:
        self._uploads_dir = uploads_dir
        self._base_url = base_url.rstrip("/")

    @property
    def uploads_dir(self) -> Path:
        return self._uploads_dir

    async def upload(self, content: bytes, mime_type: str, folder: str) -> StoredFile:
        """写入文件并返回访问 URL

        Args:
            content: 文件内容
            mime_type: MIME 类型（用于推断扩展名）
            folder: 目录提示（相对 uploads 目录）
        """
        hash_hex, size = compute_hash_and_size(content)
        extension = mimetypes.guess_extension(mime_type) or ""
        name = f"{hash_hex}{extension}"

        file_path = self._get_file_path(folder, name)
        await asyncio.to_thread(self._write, file_path, content)

        return StoredFile(
            url=f"{self._base_url}/{folder}/{name}",
            storage_ref=str(file_path),
            size=size,
            hash=hash_hex,
        )

    def _get_file_path(self, folder: str, name: str) -> Path:
        """获取文件存储路径"""
        return self._uploads_dir / folder / name

    @staticmethod
    def _write(file_path: Path, content: bytes) -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
