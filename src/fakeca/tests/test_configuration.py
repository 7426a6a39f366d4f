"""
测试 configuration.py 与 defaults.py 模块。
"""

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID
from pydantic import ValidationError

from src.fakeca import configuration, defaults
from src.fakeca.config import Config


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def test_apply_options_empty():
    """无配置项时所有字段为默认值"""
    cfg = configuration.apply_options([])
    assert cfg.subject is None
    assert cfg.issuer is None
    assert cfg.next_serial_number is None
    assert cfg.private_key is None
    assert cfg.is_ca is False


def test_apply_options_last_write_wins():
    """同一字段后面的配置项覆盖前面的"""
    cfg = configuration.apply_options(
        [
            configuration.subject(_name("first")),
            configuration.next_serial_number(1),
            configuration.is_ca(),
            configuration.subject(_name("second")),
            configuration.is_ca(False),
        ]
    )
    assert cfg.subject == _name("second")
    assert cfg.next_serial_number == 1
    assert cfg.is_ca is False


def test_apply_options_keeps_private_key():
    key = ec.generate_private_key(ec.SECP256R1())
    cfg = configuration.apply_options([configuration.private_key(key)])
    assert cfg.private_key is key


@pytest.mark.parametrize("value", [0, -1, 2**63])
def test_next_serial_number_out_of_range(value):
    """序列号必须为正的 63 位整数"""
    with pytest.raises(ValidationError):
        configuration.apply_options([configuration.next_serial_number(value)])


def test_invalid_option_values():
    """类型不符的配置值被拒绝"""
    with pytest.raises(ValidationError):
        configuration.apply_options([configuration.subject("CN=foobar")])
    with pytest.raises(ValidationError):
        configuration.apply_options([configuration.issuer("not an identity")])
    with pytest.raises(ValidationError):
        configuration.apply_options([{"unknown": 1}])


def test_configuration_is_frozen():
    cfg = configuration.apply_options([])
    with pytest.raises(ValidationError):
        cfg.is_ca = True


def test_name_counter():
    """计数器首次返回基础名称，之后追加序号"""
    names = defaults.NameCounter()
    assert names.next_name("fakeca") == "fakeca"
    assert names.next_name("fakeca") == "fakeca #1"
    assert names.next_name("other") == "other #2"
    assert names.count == 3


def test_default_subject_from_settings():
    """默认主体字段取自配置"""
    settings = Config(
        default_country=["DE"],
        default_province=["BE"],
        default_locality=["Berlin"],
        default_street_address=["Unter den Linden 1"],
        default_postal_code=["10117"],
        default_common_name="testca",
    )
    names = defaults.NameCounter()
    name = defaults.default_subject(names, settings)

    attrs = {attr.oid: attr.value for attr in name}
    assert attrs == {
        NameOID.COUNTRY_NAME: "DE",
        NameOID.STATE_OR_PROVINCE_NAME: "BE",
        NameOID.LOCALITY_NAME: "Berlin",
        NameOID.STREET_ADDRESS: "Unter den Linden 1",
        NameOID.POSTAL_CODE: "10117",
        NameOID.COMMON_NAME: "testca",
    }
    assert defaults.default_subject(names, settings).get_attributes_for_oid(NameOID.COMMON_NAME)[0].value == "testca #1"


def test_default_subject_omits_empty_fields():
    name = defaults.default_subject(defaults.NameCounter(), Config())
    assert name.get_attributes_for_oid(NameOID.STREET_ADDRESS) == []
    assert name.get_attributes_for_oid(NameOID.POSTAL_CODE) == []


def test_random_serial_number():
    """随机序列号为正的 63 位整数"""
    serials = {defaults.random_serial_number() for _ in range(100)}
    assert all(0 < sn <= defaults.MAX_SERIAL_NUMBER for sn in serials)
    assert len(serials) > 1
