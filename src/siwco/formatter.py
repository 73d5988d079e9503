"""Formatter -- SiwcoMessage -> 规范文本

规范文本就是被签名的字节，输出必须逐字节稳定：
行之间以 "\n" 连接，末尾没有换行。
"""

from datetime import UTC, datetime

import structlog

from .config import SiwcoConfig, load_siwco_config
from .models import FormattedMessage, SiwcoMessage
from .nonce import generate_nonce
from .validation import validate_message

log = structlog.get_logger()

GREETING_INFIX = " wants you to sign in with your "
GREETING_SUFFIX = "account:"
RESOURCES_LABEL = "Resources:"
RESOURCE_PREFIX = "- "


def current_timestamp() -> str:
    """当前 UTC 时间，毫秒精度，Z 结尾"""
    now = datetime.now(UTC)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def with_defaults(message: SiwcoMessage, config: SiwcoConfig) -> SiwcoMessage:
    """返回补全 nonce / issued_at 的副本，不修改入参"""
    update: dict[str, str] = {}
    if not message.nonce:
        update["nonce"] = generate_nonce(config.nonce_entropy_bits)
    if not message.issued_at:
        update["issued_at"] = current_timestamp()
    if not update:
        return message.model_copy(deep=True)
    return message.model_copy(update=update, deep=True)


def render(message: SiwcoMessage) -> str:
    """渲染已校验的消息，不做任何校验或补全"""
    lines = [
        f"{message.origin}{GREETING_INFIX}{message.chain_name or ''} {GREETING_SUFFIX}",
        message.address,
        "",
    ]

    # 无 statement 时保留两个空行（EIP-4361 布局）
    lines.extend([message.statement, ""] if message.statement else [""])

    lines.extend(
        [
            f"URI: {message.uri}",
            f"Version: {message.version}",
            f"Chain ID: {message.chain_id}",
            f"Nonce: {message.nonce}",
            f"Issued At: {message.issued_at}",
        ]
    )

    if message.expiration_time:
        lines.append(f"Expiration Time: {message.expiration_time}")
    if message.not_before:
        lines.append(f"Not Before: {message.not_before}")
    if message.request_id:
        lines.append(f"Request ID: {message.request_id}")
    if message.resources is not None:
        lines.append(RESOURCES_LABEL)
        lines.extend(f"{RESOURCE_PREFIX}{resource}" for resource in message.resources)

    return "\n".join(lines)


def to_message(message: SiwcoMessage, config: SiwcoConfig | None = None) -> FormattedMessage:
    """把消息记录格式化为规范文本

    缺失的 nonce 会被生成，缺失的 issued_at 取当前时间；
    补全后的记录通过返回值交给调用方，入参保持不变。
    再次格式化返回的记录会得到完全相同的文本。

    Args:
        message: 消息记录
        config: 校验与 nonce 配置，None 时从环境变量加载

    Returns:
        FormattedMessage(text, message)

    Raises:
        SiwcoError: 记录不满足格式不变量
    """
    if config is None:
        config = load_siwco_config()

    completed = with_defaults(message, config)
    validate_message(completed, config)
    text = render(completed)

    log.debug(
        "message_formatted",
        domain=completed.domain,
        chain_id=completed.chain_id,
        generated_nonce=not message.nonce,
        generated_issued_at=not message.issued_at,
    )
    return FormattedMessage(text=text, message=completed)
