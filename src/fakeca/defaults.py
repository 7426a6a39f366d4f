"""
文件功能：
    默认值记账：默认主体的通用名计数器与随机序列号。

公开接口：
    - NameCounter: 默认通用名计数器（"fakeca"、"fakeca #1"、"fakeca #2"……）
    - default_name_counter: 进程级共享的计数器实例
    - default_subject: 根据配置与计数器合成默认主体
    - random_serial_number: 生成密码学安全的 63 位正整数序列号
"""

import secrets
from typing import List

from cryptography import x509
from cryptography.x509.oid import NameOID

from src.fakeca.config import Config, config

# 序列号上限（不含），与 int64 最大值一致
MAX_SERIAL_NUMBER = 2**63 - 1


class NameCounter:
    """
    默认通用名计数器。
    首次取名返回基础名称，之后依次追加 " #1"、" #2"……，永不重置、永不复用。
    非线程安全：并发取名需由调用方自行加锁。
    """

    def __init__(self) -> None:
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def next_name(self, base: str) -> str:
        name = base if self._count == 0 else f"{base} #{self._count}"
        self._count += 1
        return name


default_name_counter = NameCounter()


def default_subject(names: NameCounter | None = None, settings: Config | None = None) -> x509.Name:
    """
    合成默认主体：固定的国家/省份/城市等字段，加上计数器生成的通用名。
    :param names: 通用名计数器，缺省使用进程级共享实例。
    :param settings: 配置，缺省使用全局 config。
    :return: x509.Name
    """
    names = names or default_name_counter
    settings = settings or config

    attributes: List[x509.NameAttribute] = []
    for oid, values in (
        (NameOID.COUNTRY_NAME, settings.default_country),
        (NameOID.STATE_OR_PROVINCE_NAME, settings.default_province),
        (NameOID.LOCALITY_NAME, settings.default_locality),
        (NameOID.STREET_ADDRESS, settings.default_street_address),
        (NameOID.POSTAL_CODE, settings.default_postal_code),
    ):
        attributes.extend(x509.NameAttribute(oid, value) for value in values)
    attributes.append(
        x509.NameAttribute(NameOID.COMMON_NAME, names.next_name(settings.default_common_name))
    )
    return x509.Name(attributes)


def random_serial_number() -> int:
    """生成 [1, 2^63 - 1] 区间内的随机序列号。"""
    return secrets.randbelow(MAX_SERIAL_NUMBER) + 1
