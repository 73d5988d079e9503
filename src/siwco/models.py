"""数据模型 -- SiwcoMessage + FormattedMessage + VerificationResult

SiwcoMessage 只描述结构（字段与类型），不携带语义校验：
不变量统一由 validation.validate_message() 按固定顺序检查，
以保证错误总是以 SiwcoError 的形式出现。
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .exceptions import SiwcoError


class SiwcoMessage(BaseModel):
    """签名登录消息记录

    Python 属性使用 snake_case，对外记录结构使用 camelCase
    （chainId、issuedAt ...），两种名称均可用于构造。
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    scheme: str | None = Field(default=None, description="origin 的 URI scheme，如 https")
    domain: str = Field(description="发起签名请求的 authority")
    address: str = Field(description="bech32 编码的签名者地址")
    statement: str | None = Field(default=None, description="面向用户的说明文本")
    uri: str = Field(description="签名者交互的 RFC 3986 URI")
    version: str = Field(description="消息版本，当前必须为 '1'")
    chain_id: str = Field(description="目标链 ID")
    chain_name: str | None = Field(default=None, description="问候行中显示的链名称")
    nonce: str | None = Field(default=None, description="防重放随机数，格式化时自动生成")
    issued_at: str | None = Field(default=None, description="ISO 8601 签发时间，格式化时默认当前时间")
    expiration_time: str | None = Field(default=None, description="ISO 8601 过期时间")
    not_before: str | None = Field(default=None, description="ISO 8601 生效时间")
    request_id: str | None = Field(default=None, description="请求关联标识")
    resources: list[str] | None = Field(default=None, description="签名者声明关联的资源 URI 列表")

    @property
    def origin(self) -> str:
        """问候行中的 origin：有 scheme 时为 scheme://domain"""
        if self.scheme:
            return f"{self.scheme}://{self.domain}"
        return self.domain

    def to_record(self) -> dict:
        """导出 camelCase 公开记录结构（省略未设置字段）"""
        return self.model_dump(by_alias=True, exclude_none=True)


class FormattedMessage(BaseModel):
    """to_message() 的返回值

    text 为待签名的规范文本；message 为补全 nonce / issued_at 后的记录副本，
    调用方从这里取得实际使用的 nonce 与签发时间。
    """

    text: str = Field(description="规范文本（签名对象）")
    message: SiwcoMessage = Field(description="补全默认值后的消息记录")


class VerificationResult(BaseModel):
    """verify_message() 的显式结果，失败时不抛出异常"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool = Field(description="消息与签名是否全部通过校验")
    message: SiwcoMessage | None = Field(default=None, description="解析出的消息记录")
    error: SiwcoError | None = Field(default=None, description="首个失败原因")
