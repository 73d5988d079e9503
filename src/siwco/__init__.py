"""siwco -- bech32 地址的签名登录消息

公开接口导出：规范文本格式化 / 解析 / 校验，以及依赖方校验流程。
"""

__version__ = "0.1.0"

# 配置
from .config import SiwcoConfig, load_siwco_config

# 异常
from .enums import VERIFICATION_ONLY_ERRORS, SiwcoErrorType
from .exceptions import NonceGenerationError, SiwcoError

# 核心组件
from .formatter import to_message
from .logging_config import setup_logging

# 数据模型
from .models import FormattedMessage, SiwcoMessage, VerificationResult
from .nonce import generate_nonce
from .parser import from_message
from .validation import (
    is_valid_address,
    is_valid_iso8601_date,
    is_valid_uri,
    validate_message,
)
from .verification import SignatureVerifier, verify_message

__all__ = [
    "SiwcoMessage",
    "FormattedMessage",
    "VerificationResult",
    "to_message",
    "from_message",
    "validate_message",
    "verify_message",
    "SignatureVerifier",
    "generate_nonce",
    "is_valid_address",
    "is_valid_iso8601_date",
    "is_valid_uri",
    "SiwcoConfig",
    "load_siwco_config",
    "setup_logging",
    "SiwcoError",
    "SiwcoErrorType",
    "VERIFICATION_ONLY_ERRORS",
    "NonceGenerationError",
]
