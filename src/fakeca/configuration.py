"""
文件功能：
    生成 Identity 时的配置对象与配置项。
    每个配置项只覆盖一个字段；apply_options 按顺序合并，同一字段后者覆盖前者。

公开接口：
    - Configuration: 不可变的配置值对象
    - Option: 单个配置项（字段名 -> 值）
    - subject / issuer / next_serial_number / private_key / is_ca: 配置项构造函数
    - apply_options: 将配置项序列合并为 Configuration

公开接口的 Pydantic 模型：
    - Configuration
"""

from typing import Any, Dict, Iterable, Optional

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes
from pydantic import BaseModel, ConfigDict, Field

from .defaults import MAX_SERIAL_NUMBER
from .identity import Identity

Option = Dict[str, Any]


class Configuration(BaseModel):
    """一次生成调用的配置；未设置的字段在生成时由 Resolver 填充默认值。"""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    subject: Optional[x509.Name] = None
    issuer: Optional[Identity] = None
    next_serial_number: Optional[int] = Field(default=None, gt=0, le=MAX_SERIAL_NUMBER)
    private_key: Optional[CertificateIssuerPrivateKeyTypes] = None
    is_ca: bool = False


def subject(value: x509.Name) -> Option:
    """设置证书主体。"""
    return {"subject": value}


def issuer(value: Identity) -> Option:
    """设置签发者；不设置则生成自签名的根证书。"""
    return {"issuer": value}


def next_serial_number(value: int) -> Option:
    """设置新 Identity 签发的第一张子证书的序列号。"""
    return {"next_serial_number": value}


def private_key(value: CertificateIssuerPrivateKeyTypes) -> Option:
    """使用指定的私钥代替新生成的 RSA 私钥。"""
    return {"private_key": value}


def is_ca(value: bool = True) -> Option:
    """设置 BasicConstraints 中的 CA 标记。"""
    return {"is_ca": value}


def apply_options(options: Iterable[Option]) -> Configuration:
    """
    按顺序将配置项应用到空白配置上。
    :param options: 配置项序列。
    :return: 合并后的 Configuration。
    :raises pydantic.ValidationError: 配置值非法（如序列号非正数）。
    """
    fields: Dict[str, Any] = {}
    for option in options:
        fields.update(option)
    return Configuration(**fields)
