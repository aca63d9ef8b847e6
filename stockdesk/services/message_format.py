"""
訊息樣板格式化

支援 ICU MessageFormat 的常用子集：
  - {name}                                   具名參數
  - {count, number}                          依語系格式化數字
  - {count, plural, =0 {...} one {...} other {...}}
  - {kind, select, a {...} other {...}}
  - plural 分支內的 # 代表該數值
  - '{' 與 '}' 以單引號跳脫，'' 代表單引號本身

複數類別（one / few / other ...）由 Babel 依 CLDR 規則判斷。
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Any, Mapping

from babel import Locale
from babel.numbers import format_decimal


class MessageFormatError(ValueError):
    """樣板語法錯誤"""
    pass


@dataclass(frozen=True)
class Argument:
    name: str
    kind: str | None = None  # None 或 "number"


@dataclass(frozen=True)
class Pound:
    pass


@dataclass(frozen=True)
class Branching:
    name: str
    kind: str  # "plural" 或 "select"
    options: tuple[tuple[str, tuple], ...]

    def option(self, selector: str) -> tuple | None:
        for key, nodes in self.options:
            if key == selector:
                return nodes
        return None


_SIMPLE_TYPES = ("number",)
_BRANCH_TYPES = ("plural", "select")


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, reason: str) -> MessageFormatError:
        return MessageFormatError(f"{reason}（位置 {self.pos}）: {self.text!r}")

    def parse(self) -> tuple:
        nodes = self.parse_message(in_plural=False, nested=False)
        if self.pos < len(self.text):
            raise self.error("多餘的 '}'")
        return nodes

    def parse_message(self, in_plural: bool, nested: bool) -> tuple:
        nodes: list = []
        buf: list[str] = []

        def flush():
            if buf:
                nodes.append("".join(buf))
                buf.clear()

        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == "'":
                buf.append(self.parse_quote(in_plural))
            elif ch == "{":
                flush()
                nodes.append(self.parse_argument(in_plural))
            elif ch == "}":
                if not nested:
                    raise self.error("多餘的 '}'")
                break
            elif ch == "#" and in_plural:
                flush()
                nodes.append(Pound())
                self.pos += 1
            else:
                buf.append(ch)
                self.pos += 1

        if nested and self.pos >= len(text):
            raise self.error("缺少 '}'")
        flush()
        return tuple(nodes)

    def parse_quote(self, in_plural: bool) -> str:
        text = self.text
        nxt = text[self.pos + 1] if self.pos + 1 < len(text) else ""
        if nxt == "'":
            self.pos += 2
            return "'"
        if nxt in ("{", "}") or (nxt == "#" and in_plural):
            end = self.pos + 1
            chars: list[str] = []
            while end < len(text):
                if text[end] == "'":
                    if end + 1 < len(text) and text[end + 1] == "'":
                        chars.append("'")
                        end += 2
                        continue
                    break
                chars.append(text[end])
                end += 1
            # 未關閉的引號延伸到字串結尾
            self.pos = end + 1
            return "".join(chars)
        self.pos += 1
        return "'"

    def read_token(self, stops: str) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in stops:
            self.pos += 1
        return self.text[start:self.pos].strip()

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def expect(self, ch: str) -> None:
        if self.pos >= len(self.text) or self.text[self.pos] != ch:
            raise self.error(f"預期 {ch!r}")
        self.pos += 1

    def parse_argument(self, in_plural: bool):
        self.expect("{")
        name = self.read_token(",}")
        if not name:
            raise self.error("參數名稱不可為空")
        if self.pos >= len(self.text):
            raise self.error("缺少 '}'")
        if self.text[self.pos] == "}":
            self.pos += 1
            return Argument(name)

        self.expect(",")
        kind = self.read_token(",}")
        if kind in _SIMPLE_TYPES:
            # 忽略樣式（如 {n, number, integer}），直接以語系預設格式輸出
            if self.pos < len(self.text) and self.text[self.pos] == ",":
                self.pos += 1
                self.read_token("}")
            self.expect("}")
            return Argument(name, kind)
        if kind not in _BRANCH_TYPES:
            raise self.error(f"不支援的參數類型 {kind!r}")

        self.expect(",")
        options = self.parse_options(kind == "plural" or in_plural)
        self.expect("}")
        return Branching(name, kind, options)

    def parse_options(self, in_plural: bool) -> tuple:
        options: list[tuple[str, tuple]] = []
        while True:
            self.skip_ws()
            if self.pos >= len(self.text):
                raise self.error("缺少 '}'")
            if self.text[self.pos] == "}":
                break
            selector = self.read_token("{}" + " \t\r\n")
            if not selector:
                raise self.error("缺少分支名稱")
            self.skip_ws()
            self.expect("{")
            nodes = self.parse_message(in_plural=in_plural, nested=True)
            self.expect("}")
            options.append((selector, nodes))

        if not any(key == "other" for key, _ in options):
            raise self.error("缺少 other 分支")
        return tuple(options)


@lru_cache(maxsize=512)
def parse_template(template: str) -> tuple:
    """解析樣板為節點序列（結果會快取）"""
    return _Parser(template).parse()


def _to_number(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


class MessageFormatter:
    """依指定語系格式化訊息樣板"""

    def __init__(self, locale_code: str):
        self.locale_code = locale_code
        self._locale = Locale.parse(locale_code, sep="-")

    def format(self, template: str, values: Mapping[str, Any] | None = None) -> str:
        nodes = parse_template(template)
        return self._render(nodes, values or {}, None)

    def _format_number(self, value: Any) -> str:
        number = _to_number(value)
        if number is None:
            return str(value)
        return format_decimal(number, locale=self._locale)

    def _render(self, nodes: tuple, values: Mapping[str, Any], count: Any) -> str:
        parts: list[str] = []
        for node in nodes:
            if isinstance(node, str):
                parts.append(node)
            elif isinstance(node, Pound):
                parts.append(self._format_number(count) if count is not None else "#")
            elif isinstance(node, Argument):
                if node.name not in values:
                    parts.append("{" + node.name + "}")
                elif node.kind == "number":
                    parts.append(self._format_number(values[node.name]))
                else:
                    parts.append(str(values[node.name]))
            elif node.kind == "plural":
                value = values.get(node.name)
                branch = self._plural_branch(node, value)
                parts.append(self._render(branch, values, value))
            else:
                branch = node.option(str(values.get(node.name))) or node.option("other")
                parts.append(self._render(branch, values, count))
        return "".join(parts)

    def _plural_branch(self, node: Branching, value: Any) -> tuple:
        number = _to_number(value)
        if number is None:
            return node.option("other")

        for key, nodes in node.options:
            if key.startswith("="):
                exact = _to_number(key[1:])
                if exact is not None and exact == number:
                    return nodes

        category = self._locale.plural_form(number)
        return node.option(category) or node.option("other")
