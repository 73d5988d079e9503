"""Parser -- 规范文本 -> SiwcoMessage

按行文法解析，不使用整体正则：
    问候行 / 地址行 / 空行 / [说明块 / 空行] / 后缀字段块

后缀块中的 "Label: value" 行按标签匹配，与顺序无关；
"Resources:" 引出由 "- " 开头的行组成的子块。
未识别的行被忽略，以兼容向前扩展的字段。
解析只负责结构，不做语义校验，调用方需要再调用 validate_message()。
"""

import structlog

from .enums import SiwcoErrorType
from .exceptions import SiwcoError
from .formatter import GREETING_INFIX, GREETING_SUFFIX, RESOURCE_PREFIX, RESOURCES_LABEL
from .models import SiwcoMessage

log = structlog.get_logger()

SCHEME_SEPARATOR = "://"
URI_LABEL = "URI"

# 后缀标签 -> SiwcoMessage 字段
SUFFIX_FIELDS: dict[str, str] = {
    URI_LABEL: "uri",
    "Version": "version",
    "Chain ID": "chain_id",
    "Nonce": "nonce",
    "Issued At": "issued_at",
    "Expiration Time": "expiration_time",
    "Not Before": "not_before",
    "Request ID": "request_id",
}

REQUIRED_SUFFIX_LABELS = (URI_LABEL, "Version", "Chain ID")


def _unable_to_parse(expected: str, received: str | None = None) -> SiwcoError:
    return SiwcoError(SiwcoErrorType.UNABLE_TO_PARSE, expected, received)


def _parse_greeting(line: str) -> dict[str, str | None]:
    """问候行 -> scheme / domain / chain_name"""
    origin, infix, rest = line.partition(GREETING_INFIX)
    if not infix or not rest.endswith(GREETING_SUFFIX):
        raise _unable_to_parse("greeting line '<origin> wants you to sign in ...'", line)

    scheme: str | None = None
    domain = origin
    if SCHEME_SEPARATOR in origin:
        scheme, _, domain = origin.partition(SCHEME_SEPARATOR)
    if not domain:
        raise _unable_to_parse("domain in greeting line", line)

    chain_name = rest.removesuffix(GREETING_SUFFIX).strip()
    return {"scheme": scheme or None, "domain": domain, "chain_name": chain_name or None}


def _is_suffix_start(lines: list[str], index: int) -> bool:
    return lines[index - 1] == "" and lines[index].startswith(f"{URI_LABEL}: ")


def _split_body(body: list[str]) -> tuple[str | None, list[str]]:
    """地址行之后的部分 -> (statement, 后缀行)

    后缀块从最后一个紧跟在空行之后的 "URI: " 行开始，
    statement 中引用的 "URI: " 行因此仍归入 statement。
    无 statement 时接受一个或两个空行。
    """
    if not body or body[0] != "":
        raise _unable_to_parse("blank line after address")

    for index in range(len(body) - 1, 0, -1):
        if _is_suffix_start(body, index):
            statement = "\n".join(body[1 : index - 1])
            return statement or None, body[index:]

    raise _unable_to_parse("'URI: ' line after a blank line")


def _parse_suffix(lines: list[str]) -> dict:
    fields: dict = {}
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1

        if line == RESOURCES_LABEL:
            if "resources" in fields:
                raise _unable_to_parse("a single Resources block", line)
            resources = []
            while index < len(lines) and lines[index].startswith(RESOURCE_PREFIX):
                resources.append(lines[index].removeprefix(RESOURCE_PREFIX))
                index += 1
            fields["resources"] = resources
            continue

        label, separator, value = line.partition(": ")
        field = SUFFIX_FIELDS.get(label) if separator else None
        if field is None:
            log.debug("unrecognized_message_line", line=line)
            continue
        if field in fields:
            raise _unable_to_parse(f"a single '{label}' line", line)
        fields[field] = value

    for label in REQUIRED_SUFFIX_LABELS:
        if SUFFIX_FIELDS[label] not in fields:
            raise _unable_to_parse(f"'{label}: ' line")
    return fields


def from_message(text: str) -> SiwcoMessage:
    """从规范文本中提取消息记录

    Args:
        text: 规范文本

    Returns:
        SiwcoMessage（未经语义校验）

    Raises:
        SiwcoError: UNABLE_TO_PARSE，缺少问候行、地址行或 URI / Version / Chain ID
    """
    lines = text.split("\n")
    if len(lines) < 2:
        raise _unable_to_parse("greeting and address lines", text)

    greeting = _parse_greeting(lines[0])

    address = lines[1]
    if not address:
        raise _unable_to_parse("address line", address)

    statement, suffix = _split_body(lines[2:])
    fields = _parse_suffix(suffix)

    return SiwcoMessage(
        **greeting,
        address=address,
        statement=statement,
        **fields,
    )
