"""siwco 异常体系

SiwcoError 是唯一的协议级错误类型：类型标签 + 可选的 expected/received 描述。
NonceGenerationError 表示熵源故障，属于运行环境问题，不属于协议错误。
"""

from .enums import SiwcoErrorType


class SiwcoError(Exception):
    """消息格式化 / 解析 / 校验失败"""

    def __init__(
        self,
        error_type: SiwcoErrorType,
        expected: str | None = None,
        received: str | None = None,
    ) -> None:
        """
        Args:
            error_type: 错误类型，其值即展示文本
            expected: 期望的值或通过条件
            received: 导致失败的实际值
        """
        super().__init__(str(error_type))
        self.type = error_type
        self.expected = expected
        self.received = received

    def __repr__(self) -> str:
        return (
            f"SiwcoError(type={self.type.name}, "
            f"expected={self.expected!r}, received={self.received!r})"
        )


class NonceGenerationError(RuntimeError):
    """随机数生成失败（熵源输出不足 8 个字符）

    不可恢复，调用方不应把它当作消息校验错误处理。
    """

    def __init__(self, length: int) -> None:
        super().__init__(f"nonce 生成失败: 仅得到 {length} 个字符")
        self.length = length
