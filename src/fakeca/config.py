"""
配置加载模块：支持 .env、环境变量（FAKECA_ 前缀）、工作目录 fakeca.json（或 FAKECA_CONFIG_FILE 指定）多来源合并。
公开接口：
- Config: 读取配置的设置类
- config: Config 的单例实例
内部方法：
- Config.settings_customise_sources: 自定义配置来源顺序
- Config.parse_name_parts: 将字符串/JSON 解析为 List[str]
- Config.check_signature_hash: 校验签名摘要算法名称
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Annotated, Any, Dict, List, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, PydanticBaseSettingsSource

SUPPORTED_HASHES = ("sha256", "sha384", "sha512")

# 跳过 pydantic-settings 对复杂类型的 JSON 预解码，交由 parse_name_parts 处理
NameParts = Annotated[List[str], NoDecode]


class Config(BaseSettings):
    # 默认主体（Subject）模板
    default_country: NameParts = ["US"]
    default_province: NameParts = ["CA"]
    default_locality: NameParts = ["San Francisco"]
    default_street_address: NameParts = []
    default_postal_code: NameParts = []
    default_common_name: str = "fakeca"

    # 默认密钥与签名参数
    rsa_key_size: int = Field(default=2048, ge=1024)
    rsa_public_exponent: int = 65537
    signature_hash: str = "sha256"

    # 证书有效期
    validity_days: int = Field(default=365, gt=0)
    not_before_skew_minutes: int = Field(default=1, ge=0)

    # 演示脚本（run.py）使用
    output_dir: str = "fakeca_out"
    demo_chain_depth: int = Field(default=2, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="FAKECA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator(
        "default_country",
        "default_province",
        "default_locality",
        "default_street_address",
        "default_postal_code",
        mode="before",
    )
    @classmethod
    def parse_name_parts(cls, value: Any) -> List[str]:
        """支持从环境变量以 JSON 或分隔符（逗号/分号/空白）解析主体字段。"""
        if value is None or value == "":
            return []
        if isinstance(value, list):
            return [str(v) for v in value]
        if isinstance(value, str):
            text = value.strip()
            # 优先尝试 JSON
            try:
                loaded = json.loads(text)
                if isinstance(loaded, list):
                    return [str(v) for v in loaded]
            except ValueError:
                pass
            # 回退为分隔符拆分（, ; 空白）
            # 注意：包含空格的值（如 "San Francisco"）需使用 JSON 数组
            return [p for p in re.split(r"[\s,;]+", text) if p]
        return value

    @field_validator("signature_hash", mode="before")
    @classmethod
    def check_signature_hash(cls, value: Any) -> str:
        name = str(value).strip().lower()
        if name not in SUPPORTED_HASHES:
            raise ValueError(f"不支持的签名摘要算法: {value}，可选: {', '.join(SUPPORTED_HASHES)}")
        return name

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """自定义配置来源顺序：入参 > 环境变量 > .env > fakeca.json > secrets。"""

        class JsonFileSettingsSource(PydanticBaseSettingsSource):
            """从工作目录的 fakeca.json（或 FAKECA_CONFIG_FILE 指定路径）加载配置的自定义 Source。"""

            def __init__(self, settings_cls):
                super().__init__(settings_cls)
                self._data: Dict[str, Any] | None = None

            def _load(self) -> None:
                if self._data is not None:
                    return
                cfg_path = os.environ.get("FAKECA_CONFIG_FILE")
                path = Path(cfg_path) if cfg_path else Path.cwd() / "fakeca.json"
                if not path.exists():
                    self._data = {}
                    return
                try:
                    with path.open("r", encoding="utf-8") as f:
                        data = json.load(f)
                    self._data = data if isinstance(data, dict) else {}
                except (OSError, ValueError):
                    self._data = {}

            def __call__(self) -> Dict[str, Any]:
                self._load()
                return dict(self._data or {})

            def get_field_value(self, field, field_name):  # type: ignore[override]
                """为满足抽象基类要求，按字段名/别名返回字段值。"""
                self._load()
                data = self._data or {}
                key_alias = getattr(field, "alias", None) or field_name
                if key_alias in data:
                    return data[key_alias], key_alias, True
                if field_name in data:
                    return data[field_name], field_name, True
                return None, field_name, False

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonFileSettingsSource(settings_cls),
            file_secret_settings,
        )


config = Config()
