"""
证书生成过程中的异常定义。
所有异常都源自底层密码学原语（密钥生成、签名、解析），均不可在本次调用内恢复。
"""


class FakeCAError(RuntimeError):
    """fakeca 异常基类。"""


class KeyGenerationError(FakeCAError):
    """默认私钥生成失败。"""


class CertificateCreationError(FakeCAError):
    """签名原语拒绝了证书模板或签名密钥。"""


class CertificateParseError(FakeCAError):
    """签发结果无法重新解析为证书对象。"""
