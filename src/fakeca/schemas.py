"""
Identity 摘要的数据模型定义。
"""

from pydantic import BaseModel, Field


class IdentityInfo(BaseModel):
    """
    Identity 的可读摘要，用于日志与演示输出。
    """
    subject_common_name: str | None = None
    issuer_common_name: str | None = None
    serial_number: int
    is_ca: bool
    is_root: bool
    fingerprint_sha256: str = Field(description="证书 DER 的 SHA256 指纹（hex）")
