"""
测试演示脚本 run.py。
"""

from cryptography import x509
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from src.fakeca import run


def test_build_demo_chain():
    """一个根、depth 个中间 CA 和一个叶子"""
    identities = run.build_demo_chain(1)
    root, inter, leaf = identities

    assert root.is_root
    assert inter.issuer is root
    assert leaf.issuer is inter
    assert leaf.describe().is_ca is False
    assert inter.describe().is_ca is True


def test_write_demo_chain(tmp_path):
    written = run.write_demo_chain(tmp_path, 0)

    assert set(written) == {"root.crt", "root.key", "leaf.crt", "leaf.key", "chain.pem"}
    for path in written.values():
        assert path.exists()

    leaf_cert = x509.load_pem_x509_certificate(written["leaf.crt"].read_bytes())
    root_cert = x509.load_pem_x509_certificate(written["root.crt"].read_bytes())
    leaf_cert.verify_directly_issued_by(root_cert)

    chain = x509.load_pem_x509_certificates(written["chain.pem"].read_bytes())
    assert chain == [leaf_cert, root_cert]

    leaf_key = load_pem_private_key(written["leaf.key"].read_bytes(), password=None)
    assert leaf_key.public_key().public_numbers() == leaf_cert.public_key().public_numbers()
