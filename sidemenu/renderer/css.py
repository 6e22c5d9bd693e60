"""Small stylesheet model with a single serialisation pass.

Rules are collected as data and rendered once, which keeps the compiler
free of string concatenation and lets tests inspect individual rules.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Union

from ..utils.numbers import format_number

INDENT = "    "

_UNSAFE = re.compile(r"[;{}<>]")


def css_text(value: Any) -> str:
    """Strip characters that would let a value escape its declaration."""
    return _UNSAFE.sub("", str(value)).strip()


def px(value: Any) -> str:
    return f"{format_number(value)}px"


def ms(value: Any) -> str:
    return f"{format_number(value)}ms"


def box(values: Sequence[Any]) -> str:
    return " ".join(px(value) for value in values)


@dataclass(frozen=True)
class Declaration:
    prop: str
    value: str
    important: bool = True

    def render(self) -> str:
        suffix = " !important" if self.important else ""
        return f"{self.prop}: {self.value}{suffix};"


@dataclass
class Rule:
    selectors: tuple[str, ...]
    declarations: List[Declaration] = field(default_factory=list)
    comment: Optional[str] = None

    def add(self, prop: str, value: Any, *, important: bool = True) -> "Rule":
        self.declarations.append(Declaration(prop, str(value), important))
        return self

    def extend(self, declarations: Iterable[Declaration]) -> "Rule":
        self.declarations.extend(declarations)
        return self

    def get(self, prop: str) -> Optional[str]:
        for declaration in reversed(self.declarations):
            if declaration.prop == prop:
                return declaration.value
        return None

    def render(self, depth: int = 0) -> str:
        pad = INDENT * depth
        lines: list[str] = []
        if self.comment:
            lines.append(f"{pad}/* {self.comment} */")
        for index, selector in enumerate(self.selectors):
            tail = "," if index < len(self.selectors) - 1 else " {"
            lines.append(f"{pad}{selector}{tail}")
        for declaration in self.declarations:
            lines.append(f"{pad}{INDENT}{declaration.render()}")
        lines.append(f"{pad}}}")
        return "\n".join(lines)


@dataclass
class MediaBlock:
    query: str
    rules: List[Rule] = field(default_factory=list)
    comment: Optional[str] = None

    def rule(self, *selectors: str, comment: Optional[str] = None) -> Rule:
        created = Rule(tuple(selectors), comment=comment)
        self.rules.append(created)
        return created

    def render(self, depth: int = 0) -> str:
        pad = INDENT * depth
        body = "\n\n".join(rule.render(depth + 1) for rule in self.rules if rule.declarations)
        lines: list[str] = []
        if self.comment:
            lines.append(f"{pad}/* {self.comment} */")
        lines.append(f"{pad}@media {self.query} {{")
        if body:
            lines.append(body)
        lines.append(f"{pad}}}")
        return "\n".join(lines)


Block = Union[Rule, MediaBlock]


@dataclass
class Stylesheet:
    blocks: List[Block] = field(default_factory=list)

    def rule(self, *selectors: str, comment: Optional[str] = None) -> Rule:
        created = Rule(tuple(selectors), comment=comment)
        self.blocks.append(created)
        return created

    def media(self, query: str, *, comment: Optional[str] = None) -> MediaBlock:
        created = MediaBlock(query, comment=comment)
        self.blocks.append(created)
        return created

    def rules(self) -> list[Rule]:
        return [block for block in self.blocks if isinstance(block, Rule)]

    def media_blocks(self) -> list[MediaBlock]:
        return [block for block in self.blocks if isinstance(block, MediaBlock)]

    def find(self, selector: str) -> list[Rule]:
        return [rule for rule in self.rules() if selector in rule.selectors]

    def render(self) -> str:
        rendered: list[str] = []
        for block in self.blocks:
            if isinstance(block, Rule) and not block.declarations:
                continue
            rendered.append(block.render())
        return "\n\n".join(rendered) + "\n" if rendered else ""


__all__ = [
    "Declaration",
    "Rule",
    "MediaBlock",
    "Stylesheet",
    "css_text",
    "px",
    "ms",
    "box",
]
