"""
Identity 生成的核心逻辑：将配置解析为具体参数，并调用 cryptography 完成签名。
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ed448, ed25519, rsa
from cryptography.hazmat.primitives.asymmetric.types import CertificateIssuerPrivateKeyTypes
from cryptography.hazmat.primitives.serialization import Encoding
from loguru import logger

from src.fakeca.config import Config, config
from .configuration import Configuration, Option, apply_options
from .defaults import NameCounter, default_name_counter, default_subject, random_serial_number
from .errors import CertificateCreationError, CertificateParseError, KeyGenerationError
from .identity import Identity


class Resolver:
    """
    将一次生成调用的 Configuration 解析为证书模板并签名。
    每个 Resolver 只应调用一次 generate()。
    """

    def __init__(
        self,
        configuration: Configuration,
        names: Optional[NameCounter] = None,
        settings: Optional[Config] = None,
    ) -> None:
        self.configuration = configuration
        self.names = names or default_name_counter
        self.settings = settings or config
        self._private_key: Optional[CertificateIssuerPrivateKeyTypes] = None

    def resolve_subject(self) -> x509.Name:
        if self.configuration.subject is not None:
            return self.configuration.subject
        return default_subject(self.names, self.settings)

    def resolve_serial_number(self) -> int:
        """有签发者时由签发者分配序列号，否则随机生成。"""
        if self.configuration.issuer is not None:
            return self.configuration.issuer.increment_serial_number()
        return random_serial_number()

    def resolve_next_serial_number(self) -> int:
        if self.configuration.next_serial_number is not None:
            return self.configuration.next_serial_number
        return random_serial_number()

    def resolve_private_key(self) -> CertificateIssuerPrivateKeyTypes:
        """
        返回配置中的私钥；未配置时生成新的 RSA 私钥（同一 Resolver 内只生成一次）。
        :raises KeyGenerationError: 密钥生成失败。
        """
        if self.configuration.private_key is not None:
            return self.configuration.private_key
        if self._private_key is None:
            try:
                self._private_key = rsa.generate_private_key(
                    public_exponent=self.settings.rsa_public_exponent,
                    key_size=self.settings.rsa_key_size,
                )
            except Exception as e:
                logger.error(f"生成 RSA 私钥失败: {e}")
                raise KeyGenerationError(f"生成 RSA 私钥失败: {e}") from e
        return self._private_key

    def _signature_hash(self, signing_key: CertificateIssuerPrivateKeyTypes) -> Optional[hashes.HashAlgorithm]:
        # Ed25519 / Ed448 自带摘要，签名时必须传 None
        if isinstance(signing_key, (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)):
            return None
        return getattr(hashes, self.settings.signature_hash.upper())()

    def generate(self) -> Identity:
        """
        解析配置、签名并解析结果，返回新的 Identity。
        :raises KeyGenerationError / CertificateCreationError / CertificateParseError
        """
        issuer = self.configuration.issuer
        subject = self.resolve_subject()
        serial_number = self.resolve_serial_number()
        private_key = self.resolve_private_key()

        # 根证书自签名；否则由签发者的私钥签名
        if issuer is None:
            issuer_name = subject
            signing_key = private_key
        else:
            issuer_name = issuer.certificate.subject
            signing_key = issuer.private_key

        now = datetime.now(timezone.utc)
        builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(issuer_name)
            .public_key(private_key.public_key())
            .serial_number(serial_number)
            .not_valid_before(now - timedelta(minutes=self.settings.not_before_skew_minutes))
            .not_valid_after(now + timedelta(days=self.settings.validity_days))
            .add_extension(
                x509.BasicConstraints(ca=self.configuration.is_ca, path_length=None),
                critical=True,
            )
        )

        try:
            signed = builder.sign(
                private_key=signing_key,
                algorithm=self._signature_hash(signing_key),
            )
            der = signed.public_bytes(Encoding.DER)
        except (ValueError, TypeError) as e:
            logger.error(f"证书签发失败 (serial={serial_number}): {e}")
            raise CertificateCreationError(f"证书签发失败: {e}") from e

        try:
            certificate = x509.load_der_x509_certificate(der)
        except ValueError as e:
            logger.error(f"解析签发结果失败 (serial={serial_number}): {e}")
            raise CertificateParseError(f"解析签发结果失败: {e}") from e

        identity = Identity(
            certificate=certificate,
            private_key=private_key,
            issuer=issuer,
            next_serial_number=self.resolve_next_serial_number(),
        )
        logger.debug(
            f"已生成证书: subject={subject.rfc4514_string()}, issuer={issuer_name.rfc4514_string()}, "
            f"serial={serial_number}, is_ca={self.configuration.is_ca}"
        )
        return identity


def new(
    *options: Option,
    names: Optional[NameCounter] = None,
    settings: Optional[Config] = None,
) -> Identity:
    """
    按配置项生成一个新的 Identity。
    :param options: 配置项，按顺序应用，同一字段后者覆盖前者。
    :param names: 默认通用名计数器，缺省使用进程级共享实例。
    :param settings: 配置，缺省使用全局 config。
    :return: 新的 Identity。
    """
    return Resolver(apply_options(options), names=names, settings=settings).generate()
