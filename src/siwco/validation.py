"""消息校验 -- 检查 SiwcoMessage 的格式不变量

检查顺序固定，首个失败即抛出 SiwcoError，不累积多个错误：
    地址 -> domain -> URI -> version -> nonce -> issued_at -> expiration_time -> not_before

时间窗口是否有效（是否过期、是否已生效）不在此处检查，见 verification 模块。
"""

import re
from datetime import date

from bech32 import bech32_decode, convertbits
from rfc3986 import exceptions as uri_exceptions
from rfc3986 import uri_reference, validators

from .config import DEFAULT_ADDRESS_LENGTH, SiwcoConfig, load_siwco_config
from .enums import SiwcoErrorType
from .exceptions import SiwcoError
from .models import SiwcoMessage

SUPPORTED_VERSION = "1"

NONCE_PATTERN = re.compile(r"[A-Za-z0-9]{8,}")

ISO8601_PATTERN = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>0[1-9]|1[012])-(?P<day>0[1-9]|[12][0-9]|3[01])"
    r"[Tt]([01][0-9]|2[0-3]):([0-5][0-9]):([0-5][0-9]|60)(\.[0-9]+)?"
    r"([Zz]|[+-]([01][0-9]|2[0-3]):[0-5][0-9])"
)

_URI_VALIDATOR = (
    validators.Validator()
    .require_presence_of("scheme")
    .check_validity_of("scheme", "userinfo", "host", "port", "path", "query", "fragment")
)


def is_valid_iso8601_date(value: str | None) -> bool:
    """判断是否为日历上合法的 ISO 8601 时间

    先做词法匹配，再构造日期对象排除 2 月 30 日这类不存在的日期。
    """
    if not value:
        return False

    match = ISO8601_PATTERN.fullmatch(value)
    if match is None:
        return False

    try:
        date(int(match["year"]), int(match["month"]), int(match["day"]))
    except ValueError:
        return False
    return True


def decode_address(value: str) -> tuple[str, bytes] | None:
    """bech32 解码为 (前缀, payload)，失败返回 None"""
    decoded = bech32_decode(value)
    prefix, words = decoded[0], decoded[1]
    if prefix is None or words is None:
        return None

    payload = convertbits(words, 5, 8, False)
    if payload is None:
        return None
    return prefix, bytes(payload)


def is_valid_address(
    value: str | None,
    required_prefix: str | None = None,
    length: int | None = None,
) -> bool:
    """判断是否为合法的 bech32 地址

    Args:
        value: 地址字符串
        required_prefix: 要求的前缀，None 或空白表示不限制
        length: payload 字节数，None 时为 20
    """
    if not value:
        return False

    decoded = decode_address(value)
    if decoded is None:
        return False
    prefix, payload = decoded

    if required_prefix and required_prefix.strip() and prefix != required_prefix.strip():
        return False

    return len(payload) == (length or DEFAULT_ADDRESS_LENGTH)


def is_valid_uri(value: str | None) -> bool:
    """判断是否为带 scheme 的 RFC 3986 URI"""
    if not value:
        return False
    try:
        _URI_VALIDATOR.validate(uri_reference(value))
    except uri_exceptions.ValidationError:
        return False
    return True


def _check_time(field: str, value: str | None) -> None:
    if value is not None and not is_valid_iso8601_date(value):
        raise SiwcoError(
            SiwcoErrorType.INVALID_TIME_FORMAT,
            f"{field} to be a valid ISO-8601 date.",
            value,
        )


def validate_message(message: SiwcoMessage, config: SiwcoConfig | None = None) -> None:
    """按固定顺序校验消息记录

    Args:
        message: 待校验的消息
        config: 地址前缀 / 长度约束，None 时从环境变量加载

    Raises:
        SiwcoError: 首个不满足的不变量
    """
    if config is None:
        config = load_siwco_config()

    if not is_valid_address(
        message.address,
        required_prefix=config.address_prefix,
        length=config.address_length,
    ):
        expected = f"bech32 address with a {config.address_length}-byte payload"
        if config.address_prefix:
            expected += f" and prefix '{config.address_prefix}'"
        raise SiwcoError(SiwcoErrorType.INVALID_ADDRESS, f"{expected}.", message.address)

    if not message.domain or "#" in message.domain or "?" in message.domain:
        raise SiwcoError(
            SiwcoErrorType.INVALID_DOMAIN,
            f"{message.domain} to be a valid domain.",
            message.domain,
        )

    if not is_valid_uri(message.uri):
        raise SiwcoError(
            SiwcoErrorType.INVALID_URI,
            f"{message.uri} to be a valid uri.",
            message.uri,
        )

    if message.version != SUPPORTED_VERSION:
        raise SiwcoError(
            SiwcoErrorType.INVALID_MESSAGE_VERSION,
            SUPPORTED_VERSION,
            message.version,
        )

    if message.nonce is None or NONCE_PATTERN.fullmatch(message.nonce) is None:
        raise SiwcoError(
            SiwcoErrorType.INVALID_NONCE,
            "Length >= 8. Alphanumeric.",
            message.nonce,
        )

    _check_time("issuedAt", message.issued_at)
    _check_time("expirationTime", message.expiration_time)
    _check_time("notBefore", message.not_before)
