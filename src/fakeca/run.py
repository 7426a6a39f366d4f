#!/usr/bin/env python
"""
演示脚本：生成 根 CA -> 中间 CA ... -> 叶子证书 的证书链，并写入输出目录。
用法：python -m src.fakeca.run
"""

import os
import sys
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv
from loguru import logger

from src.fakeca.config import config
from src.fakeca.configuration import is_ca
from src.fakeca.identity import Identity
from src.fakeca.resolver import new


def build_demo_chain(depth: int) -> List[Identity]:
    """
    生成一条证书链：一个根 CA、depth 个中间 CA 和一个叶子证书。
    :return: 从根到叶子排列的 Identity 列表。
    """
    identities = [new(is_ca())]
    for _ in range(depth):
        identities.append(identities[-1].issue(is_ca()))
    identities.append(identities[-1].issue())
    return identities


def write_identity(identity: Identity, directory: Path, name: str) -> Dict[str, Path]:
    """将证书与私钥以 PEM 格式写入 <name>.crt / <name>.key。"""
    directory.mkdir(parents=True, exist_ok=True)
    cert_path = directory / f"{name}.crt"
    key_path = directory / f"{name}.key"
    cert_path.write_bytes(identity.certificate_pem())
    key_path.write_bytes(identity.private_key_pem())
    os.chmod(key_path, 0o600)
    return {"cert": cert_path, "key": key_path}


def write_demo_chain(directory: Path, depth: int) -> Dict[str, Path]:
    """
    生成演示证书链并写入目录，另写出叶子证书的完整链 chain.pem。
    :return: 文件名到路径的映射。
    """
    identities = build_demo_chain(depth)
    names = ["root"] + [f"intermediate{i}" for i in range(1, depth + 1)] + ["leaf"]

    written: Dict[str, Path] = {}
    for name, identity in zip(names, identities):
        paths = write_identity(identity, directory, name)
        written[f"{name}.crt"] = paths["cert"]
        written[f"{name}.key"] = paths["key"]
        logger.info(f"{name}: {identity.describe().model_dump_json()}")

    chain_path = directory / "chain.pem"
    chain_path.write_bytes(identities[-1].chain_pem())
    written["chain.pem"] = chain_path
    return written


if __name__ == "__main__":
    load_dotenv(Path.cwd() / ".env")
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.remove()
    logger.add(sys.stderr, level=log_level)
    logger.info("fakeca demo chain, start running!")
    output_dir = Path(config.output_dir)
    files = write_demo_chain(output_dir, config.demo_chain_depth)
    logger.info(f"已写入 {len(files)} 个文件到 {output_dir.resolve()}")
