"""Verification -- 依赖方侧的完整校验流程

解析 -> 格式校验 -> scheme/domain/nonce 比对 -> 时间窗口 -> 签名。
签名算法由调用方通过 SignatureVerifier 提供，本模块不实现任何密码学。
结果以 VerificationResult 返回，失败时不抛出 SiwcoError。
"""

from datetime import UTC, datetime
from typing import Protocol

import structlog

from .config import SiwcoConfig, load_siwco_config
from .enums import SiwcoErrorType
from .exceptions import SiwcoError
from .models import SiwcoMessage, VerificationResult
from .parser import from_message
from .validation import validate_message

log = structlog.get_logger()


class SignatureVerifier(Protocol):
    """地址签名校验回调

    入参为消息中的地址、收到的规范文本原文和签名，签名匹配时返回 True。
    """

    def __call__(self, address: str, text: str, signature: str) -> bool: ...


def _parse_instant(value: str) -> datetime:
    # fromisoformat 不接受小写 t / z 分隔符
    instant = datetime.fromisoformat(value.upper())
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant


def _check_expectations(
    message: SiwcoMessage,
    scheme: str | None,
    domain: str | None,
    nonce: str | None,
) -> None:
    if scheme is not None and message.scheme != scheme:
        raise SiwcoError(SiwcoErrorType.SCHEME_MISMATCH, scheme, message.scheme)
    if domain is not None and message.domain != domain:
        raise SiwcoError(SiwcoErrorType.DOMAIN_MISMATCH, domain, message.domain)
    if nonce is not None and message.nonce != nonce:
        raise SiwcoError(SiwcoErrorType.NONCE_MISMATCH, nonce, message.nonce)


def _check_time_bounds(message: SiwcoMessage, now: datetime) -> None:
    try:
        expiration = _parse_instant(message.expiration_time) if message.expiration_time else None
        not_before = _parse_instant(message.not_before) if message.not_before else None
    except ValueError as exc:
        # 词法合法但无法换算为时刻，例如闰秒 :60
        raise SiwcoError(
            SiwcoErrorType.INVALID_TIME_FORMAT,
            "a representable ISO-8601 instant",
            str(exc),
        ) from exc

    if expiration is not None and now >= expiration:
        raise SiwcoError(
            SiwcoErrorType.EXPIRED_MESSAGE,
            f"{now.isoformat()} < {message.expiration_time}",
            message.expiration_time,
        )
    if not_before is not None and now < not_before:
        raise SiwcoError(
            SiwcoErrorType.NOT_YET_VALID_MESSAGE,
            f"{now.isoformat()} >= {message.not_before}",
            message.not_before,
        )


def _check_signature(
    message: SiwcoMessage,
    text: str,
    signature: str,
    verifier: SignatureVerifier,
) -> None:
    try:
        matched = verifier(message.address, text, signature)
    except Exception as exc:
        # 回调内部的解码 / 密码学异常统一视为签名不匹配
        log.warning(
            "signature_verifier_error",
            address=message.address,
            error_type=type(exc).__name__,
        )
        matched = False

    if not matched:
        raise SiwcoError(
            SiwcoErrorType.INVALID_SIGNATURE,
            f"signature of {message.address}",
            signature,
        )


def verify_message(
    text: str,
    signature: str,
    verifier: SignatureVerifier,
    *,
    scheme: str | None = None,
    domain: str | None = None,
    nonce: str | None = None,
    now: datetime | None = None,
    config: SiwcoConfig | None = None,
) -> VerificationResult:
    """校验收到的规范文本与签名

    Args:
        text: 收到的规范文本（签名对象原文）
        signature: 签名
        verifier: 地址签名校验回调
        scheme: 期望的 scheme，None 表示不比对
        domain: 期望的 domain，None 表示不比对
        nonce: 期望的 nonce，None 表示不比对
        now: 判断时间窗口使用的当前时间，默认 UTC 当前时间
        config: 地址约束配置

    Returns:
        VerificationResult，失败时 error 为首个失败原因

    Raises:
        pydantic.ValidationError: config 为 None 且 SIWCO_* 环境变量越界，
            在解析消息之前抛出
    """
    if config is None:
        config = load_siwco_config()

    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    message: SiwcoMessage | None = None
    try:
        message = from_message(text)
        validate_message(message, config)
        _check_expectations(message, scheme, domain, nonce)
        _check_time_bounds(message, now)
        _check_signature(message, text, signature, verifier)
    except SiwcoError as exc:
        log.info(
            "message_verification_failed",
            error=exc.type.name,
            domain=message.domain if message else None,
        )
        return VerificationResult(success=False, message=message, error=exc)

    return VerificationResult(success=True, message=message)
