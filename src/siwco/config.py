"""SiwcoConfig -- 消息校验与 nonce 生成配置

从环境变量加载配置，未设置时使用协议默认值。
"""

import os

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

DEFAULT_NONCE_ENTROPY_BITS = 96
DEFAULT_ADDRESS_LENGTH = 20


class SiwcoConfig(BaseModel):
    """siwco 配置 -- 从环境变量加载

    环境变量:
        SIWCO_NONCE_ENTROPY_BITS: nonce 熵（bit，默认 96，不低于 96）
        SIWCO_ADDRESS_PREFIX: 要求的 bech32 前缀（默认空，不限制）
        SIWCO_ADDRESS_LENGTH: 地址 payload 字节数（默认 20）
    """

    nonce_entropy_bits: int = Field(
        default=DEFAULT_NONCE_ENTROPY_BITS,
        ge=DEFAULT_NONCE_ENTROPY_BITS,
        description="生成 nonce 的最小熵（bit）",
    )
    address_prefix: str = Field(
        default="",
        description="地址必须使用的 bech32 前缀，空字符串表示不限制",
    )
    address_length: int = Field(
        default=DEFAULT_ADDRESS_LENGTH,
        ge=1,
        description="地址解码后的 payload 字节数",
    )


def _read_int(env_var: str, fallback: int) -> int | None:
    """读取整数环境变量，无效值记录 warning 并返回 None"""
    val = os.environ.get(env_var)
    if not val:
        return None
    try:
        return int(val)
    except ValueError:
        log.warning(
            f"invalid_{env_var.removeprefix('SIWCO_').lower()}_config",
            env_var=env_var,
            value=val,
            fallback=fallback,
        )
        # 使用默认值，不阻塞调用
        return None


def load_siwco_config() -> SiwcoConfig:
    """从环境变量加载 siwco 配置

    环境变量映射:
        SIWCO_NONCE_ENTROPY_BITS -> nonce_entropy_bits (默认 96)
        SIWCO_ADDRESS_PREFIX -> address_prefix (默认 "")
        SIWCO_ADDRESS_LENGTH -> address_length (默认 20)

    Returns:
        SiwcoConfig 实例
    """
    kwargs: dict = {}

    bits = _read_int("SIWCO_NONCE_ENTROPY_BITS", DEFAULT_NONCE_ENTROPY_BITS)
    if bits is not None:
        kwargs["nonce_entropy_bits"] = bits

    if val := os.environ.get("SIWCO_ADDRESS_PREFIX"):
        kwargs["address_prefix"] = val.strip()

    length = _read_int("SIWCO_ADDRESS_LENGTH", DEFAULT_ADDRESS_LENGTH)
    if length is not None:
        kwargs["address_length"] = length

    return SiwcoConfig(**kwargs)
