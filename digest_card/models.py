"""
Data models for the Digest Card application.
"""

from typing import Dict, List, Literal, TypedDict, Union


class Article(TypedDict):
    """Type definition for a ranked article of the digest."""

    rank: int  # 1-3 from the medal, 0 when unranked
    title: str
    link: str
    source: str
    score: int
    category: str
    summary: str
    reason: str
    keywords: str


class DigestRecord(TypedDict):
    """Structured content extracted from a markdown digest."""

    date: str
    highlights: str
    top_articles: List[Article]
    total_articles: int
    categories: Dict[str, int]  # Declared for future use, never populated


class MarkdownText(TypedDict):
    tag: Literal["lark_md"]
    content: str


class PlainText(TypedDict):
    tag: Literal["plain_text"]
    content: str


class TextBlock(TypedDict):
    tag: Literal["div"]
    text: MarkdownText


class DividerBlock(TypedDict):
    tag: Literal["hr"]


class Button(TypedDict):
    tag: Literal["button"]
    text: PlainText
    type: str
    url: str


class ActionBlock(TypedDict):
    tag: Literal["action"]
    actions: List[Button]


Block = Union[TextBlock, DividerBlock, ActionBlock]


class CardHeader(TypedDict):
    template: str
    title: PlainText


class CardConfig(TypedDict):
    wide_screen_mode: bool


class CardDocument(TypedDict):
    """Type definition for a Feishu interactive card."""

    config: CardConfig
    header: CardHeader
    elements: List[Block]
