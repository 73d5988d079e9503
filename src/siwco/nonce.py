"""Nonce 生成 -- 基于 CSPRNG 的字母数字随机串

默认 96 bit 熵，在长度与安全性之间取平衡；
62 字符字母表下每个字符约 5.95 bit，96 bit 对应 17 个字符。
"""

import math
import secrets
import string

import structlog

from .config import load_siwco_config
from .exceptions import NonceGenerationError

log = structlog.get_logger()

NONCE_ALPHABET = string.ascii_letters + string.digits
MIN_NONCE_LENGTH = 8


def nonce_length_for_entropy(entropy_bits: int) -> int:
    """达到 entropy_bits 熵所需的字符数"""
    return math.ceil(entropy_bits / math.log2(len(NONCE_ALPHABET)))


def generate_nonce(entropy_bits: int | None = None) -> str:
    """生成防重放 nonce

    Args:
        entropy_bits: 最小熵（bit），None 时使用配置值（默认 96）

    Returns:
        满足 [A-Za-z0-9]{8,} 的随机串

    Raises:
        NonceGenerationError: 熵源输出不足 8 个字符
    """
    if entropy_bits is None:
        entropy_bits = load_siwco_config().nonce_entropy_bits

    length = nonce_length_for_entropy(entropy_bits)
    nonce = "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))

    if len(nonce) < MIN_NONCE_LENGTH:
        raise NonceGenerationError(len(nonce))

    log.debug("nonce_generated", length=len(nonce), entropy_bits=entropy_bits)
    return nonce
