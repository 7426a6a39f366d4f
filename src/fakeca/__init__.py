"""
fakeca：为测试生成合成的 CA / 叶子证书链。

此包按功能拆分：配置项（configuration）、默认值记账（defaults）、生成逻辑（resolver）与证书链节点（identity）。
"""

from .configuration import (
    Configuration,
    Option,
    apply_options,
    is_ca,
    issuer,
    next_serial_number,
    private_key,
    subject,
)
from .defaults import NameCounter, default_name_counter
from .errors import (
    CertificateCreationError,
    CertificateParseError,
    FakeCAError,
    KeyGenerationError,
)
from .identity import Identity
from .resolver import Resolver, new

__all__ = [
    "Configuration",
    "Option",
    "apply_options",
    "is_ca",
    "issuer",
    "next_serial_number",
    "private_key",
    "subject",
    "NameCounter",
    "default_name_counter",
    "CertificateCreationError",
    "CertificateParseError",
    "FakeCAError",
    "KeyGenerationError",
    "Identity",
    "Resolver",
    "new",
]
