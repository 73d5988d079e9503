"""siwco 测试 fixtures"""

import pytest
import structlog
from siwco.config import SiwcoConfig
from siwco.models import SiwcoMessage

BITSONG_ADDRESS = "bitsong1h882ezq7dyewld6gfv2e06qymvjxnu842586h2"

CANONICAL_NONCE = "Xk2m9QpL7rT4vW8y"
CANONICAL_ISSUED_AT = "2021-09-30T16:25:24.000Z"

CANONICAL_TEXT = f"""https://bitsong.io wants you to sign in with your bitsong account:
bitsong1h882ezq7dyewld6gfv2e06qymvjxnu842586h2

this is a statement

URI: https://bitsong.io
Version: 1
Chain ID: bitsong-2b
Nonce: {CANONICAL_NONCE}
Issued At: {CANONICAL_ISSUED_AT}
Expiration Time: 2021-08-01T00:00:00Z
Not Before: 2021-08-01T00:00:00Z
Request ID: 123
Resources:
- track:upload
- track:play"""


@pytest.fixture
def config() -> SiwcoConfig:
    """不受环境变量影响的默认配置"""
    return SiwcoConfig()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """清除 SIWCO_* 环境变量，避免宿主环境干扰"""
    for var in (
        "SIWCO_NONCE_ENTROPY_BITS",
        "SIWCO_ADDRESS_PREFIX",
        "SIWCO_ADDRESS_LENGTH",
        "SIWCO_LOG_FORMAT",
        "SIWCO_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def full_message() -> SiwcoMessage:
    """所有可选字段均已填写的消息"""
    return SiwcoMessage(
        address=BITSONG_ADDRESS,
        nonce=CANONICAL_NONCE,
        issued_at=CANONICAL_ISSUED_AT,
        scheme="https",
        request_id="123",
        not_before="2021-08-01T00:00:00Z",
        expiration_time="2021-08-01T00:00:00Z",
        chain_name="bitsong",
        statement="this is a statement",
        chain_id="bitsong-2b",
        domain="bitsong.io",
        version="1",
        uri="https://bitsong.io",
        resources=["track:upload", "track:play"],
    )


@pytest.fixture
def minimal_message() -> SiwcoMessage:
    """只有必填字段的消息"""
    return SiwcoMessage(
        domain="service.org",
        address=BITSONG_ADDRESS,
        uri="https://service.org/login",
        version="1",
        chain_id="bitsong-2b",
    )
