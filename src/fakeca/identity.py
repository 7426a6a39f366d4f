"""
文件功能：
    Identity：一张已签名证书、与之配对的私钥，以及可选的签发者引用。
    多个 Identity 通过签发者引用组成任意深度的信任树。

公开接口：
    - Identity.issue: 以当前 Identity 为签发者生成子 Identity
    - Identity.increment_serial_number: 分配下一个序列号
    - Identity.chain: 从自身到根的证书列表
    - Identity.chain_pool: 从自身到根的证书组成的信任库
    - Identity.certificate_pem / private_key_pem / chain_pem: PEM 导出
    - Identity.describe: 生成 IdentityInfo 摘要
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    PrivateFormat,
    NoEncryption,
)
from cryptography.x509.oid import NameOID
from cryptography.x509.verification import Store

from .schemas import IdentityInfo


class Identity:
    """
    证书 + 私钥 + 可选签发者。
    创建后除内部序列号计数器外不可变；根 Identity（无签发者）为自签名证书。
    """

    def __init__(
        self,
        certificate: x509.Certificate,
        private_key: CertificateIssuerPrivateKeyTypes,
        issuer: Optional[Identity],
        next_serial_number: int,
    ) -> None:
        self._certificate = certificate
        self._private_key = private_key
        self._issuer = issuer
        self._next_serial_number = next_serial_number

    @property
    def certificate(self) -> x509.Certificate:
        return self._certificate

    @property
    def private_key(self) -> CertificateIssuerPrivateKeyTypes:
        return self._private_key

    @property
    def issuer(self) -> Optional[Identity]:
        """签发者（父 Identity），仅用于查找；根 Identity 返回 None。"""
        return self._issuer

    @property
    def next_serial_number(self) -> int:
        """下一次签发子证书时将使用的序列号。"""
        return self._next_serial_number

    @property
    def is_root(self) -> bool:
        return self._issuer is None

    def issue(self, *options, names=None, settings=None) -> Identity:
        """
        以当前 Identity 为签发者生成一个新的子 Identity。
        每次调用使本 Identity 的序列号计数器恰好前进一位。
        :param options: 与 new() 相同的配置项；签发者固定为当前 Identity。
        :return: 新的子 Identity。
        """
        # 延迟导入，避免与 resolver / configuration 循环引用
        from .configuration import issuer
        from .resolver import new

        return new(*options, issuer(self), names=names, settings=settings)

    def increment_serial_number(self) -> int:
        """返回当前序列号，并将计数器加一。"""
        serial_number = self._next_serial_number
        self._next_serial_number += 1
        return serial_number

    def _lineage(self) -> Iterator[Identity]:
        this: Optional[Identity] = self
        while this is not None:
            yield this
            this = this.issuer

    def chain(self) -> List[x509.Certificate]:
        """从自身开始沿签发者引用直到根的证书列表（子在前，根在后）。"""
        return [identity.certificate for identity in self._lineage()]

    def chain_pool(self) -> Store:
        """将 chain() 中的证书放入信任库，用于证书链校验。"""
        return Store(self.chain())

    def certificate_pem(self) -> bytes:
        return self._certificate.public_bytes(Encoding.PEM)

    def private_key_pem(self) -> bytes:
        """未加密的 PKCS#8 PEM 私钥，仅用于测试。"""
        return self._private_key.private_bytes(
            encoding=Encoding.PEM,
            format=PrivateFormat.PKCS8,
            encryption_algorithm=NoEncryption(),
        )

    def chain_pem(self) -> bytes:
        return b"".join(cert.public_bytes(Encoding.PEM) for cert in self.chain())

    def describe(self) -> IdentityInfo:
        def _get_cn_from_name(name: x509.Name) -> str | None:
            try:
                return name.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value
            except IndexError:
                return None

        try:
            is_ca = self._certificate.extensions.get_extension_for_class(x509.BasicConstraints).value.ca
        except x509.ExtensionNotFound:
            is_ca = False

        return IdentityInfo(
            subject_common_name=_get_cn_from_name(self._certificate.subject),
            issuer_common_name=_get_cn_from_name(self._certificate.issuer),
            serial_number=self._certificate.serial_number,
            is_ca=is_ca,
            is_root=self.is_root,
            fingerprint_sha256=self._certificate.fingerprint(hashes.SHA256()).hex(),
        )

    def __repr__(self) -> str:
        return f"Identity(subject={self._certificate.subject.rfc4514_string()!r}, serial_number={self._certificate.serial_number})"
