"""枚举定义 -- 签名登录消息的错误词汇表

SiwcoErrorType 的取值即面向用户的展示文本，
同时作为客户端可直接分支判断的稳定协议常量。
"""

from enum import StrEnum


class SiwcoErrorType(StrEnum):
    """消息错误类型（封闭集合）"""

    # 仅由校验流程（verification）产生
    EXPIRED_MESSAGE = "Expired message."
    NOT_YET_VALID_MESSAGE = "Message is not valid yet."
    SCHEME_MISMATCH = "Scheme does not match provided scheme for verification."
    DOMAIN_MISMATCH = "Domain does not match provided domain for verification."
    NONCE_MISMATCH = "Nonce does not match provided nonce for verification."
    INVALID_SIGNATURE = "Signature does not match address of the message."

    # 由 Validator / Parser 产生
    INVALID_DOMAIN = "Invalid domain."
    INVALID_ADDRESS = "Invalid address."
    INVALID_URI = "URI does not conform to RFC 3986."
    INVALID_NONCE = "Nonce size smaller then 8 characters or is not alphanumeric."
    INVALID_TIME_FORMAT = "Invalid time format."
    INVALID_MESSAGE_VERSION = "Invalid message version."
    UNABLE_TO_PARSE = "Unable to parse the message."


# 只能由校验流程产生的错误类型
VERIFICATION_ONLY_ERRORS: frozenset[SiwcoErrorType] = frozenset(
    {
        SiwcoErrorType.EXPIRED_MESSAGE,
        SiwcoErrorType.NOT_YET_VALID_MESSAGE,
        SiwcoErrorType.SCHEME_MISMATCH,
        SiwcoErrorType.DOMAIN_MISMATCH,
        SiwcoErrorType.NONCE_MISMATCH,
        SiwcoErrorType.INVALID_SIGNATURE,
    }
)
