"""
Card builder module for turning a parsed digest into a Feishu card.

This module provides the CardBuilder class which handles:
- Accumulating the ordered card elements (text, dividers, action rows)
- Rendering the highlights, top articles and overview sections
- Assembling the final card document with header and config
"""

import logging
from typing import List, Optional

from digest_card.models import (
    ActionBlock,
    Article,
    Block,
    Button,
    CardDocument,
    DigestRecord,
    DividerBlock,
    MarkdownText,
    PlainText,
    TextBlock,
)

logger = logging.getLogger(__name__)


class CardBuilder:
    """Builds Feishu interactive cards from digest records."""

    HEADER_TEMPLATE = "blue"
    HEADER_LABEL = "AI 博客每日精选"
    HIGHLIGHTS_HEADING = "**📝 今日看点**"
    HIGHLIGHTS_PLACEHOLDER = "今日精选技术文章已生成，请查看详细报告。"
    TOP_HEADING = "**🏆 今日必读 Top 3**"
    OVERVIEW_HEADING = "**📊 数据概览**"
    REPORT_BUTTON_LABEL = "查看完整报告"
    RANK_EMOJIS = ("🥇", "🥈", "🥉")
    MAX_ARTICLES = 3
    SCORE_SCALE = 30
    SUMMARY_LIMIT = 150

    def __init__(self) -> None:
        self._elements: List[Block] = []

    def text(self, content: str) -> "CardBuilder":
        """Appends a lark_md text block."""
        self._elements.append(
            TextBlock(tag="div", text=MarkdownText(tag="lark_md", content=content))
        )
        return self

    def divider(self) -> "CardBuilder":
        """Appends a horizontal rule."""
        self._elements.append(DividerBlock(tag="hr"))
        return self

    def button(self, label: str, url: str) -> "CardBuilder":
        """Appends an action row holding a single primary button."""
        self._elements.append(
            ActionBlock(
                tag="action",
                actions=[
                    Button(
                        tag="button",
                        text=PlainText(tag="plain_text", content=label),
                        type="primary",
                        url=url,
                    )
                ],
            )
        )
        return self

    def _truncate_summary(self, summary: str) -> str:
        if len(summary) > self.SUMMARY_LIMIT:
            return summary[: self.SUMMARY_LIMIT] + "..."
        return summary

    def _render_article(self, index: int, article: Article) -> None:
        """Renders one top article followed by a divider."""
        if index < len(self.RANK_EMOJIS):
            rank_label = self.RANK_EMOJIS[index]
        else:
            rank_label = f"{index + 1}."

        self.text(f"{rank_label} **[{article['title']}]({article['link']})**")
        self.text(
            f"📰 {article['source']} · ⭐ {article['score']}/{self.SCORE_SCALE}"
            f" · {article['category']}"
        )
        self.text(f"> {self._truncate_summary(article['summary'])}")
        if article["reason"]:
            self.text(f"💡 *{article['reason']}*")
        if article["keywords"]:
            self.text(f"🏷️ {article['keywords']}")
        self.divider()

    def build(
        self, record: DigestRecord, report_url: Optional[str] = None
    ) -> CardDocument:
        """Generates the card document for a digest record."""
        self._elements = []

        self.text(self.HIGHLIGHTS_HEADING)
        self.text(record["highlights"].strip() or self.HIGHLIGHTS_PLACEHOLDER)
        self.divider()

        self.text(self.TOP_HEADING)
        # Array order, not the parsed rank, decides the medal
        for index, article in enumerate(record["top_articles"][: self.MAX_ARTICLES]):
            self._render_article(index, article)

        self.text(self.OVERVIEW_HEADING)
        self.text(f"📄 文章总数: {record['total_articles']} 篇")

        if report_url:
            self.divider()
            self.button(self.REPORT_BUTTON_LABEL, report_url)

        logger.debug("Built card with %d elements.", len(self._elements))
        return CardDocument(
            config={"wide_screen_mode": True},
            header={
                "template": self.HEADER_TEMPLATE,
                "title": PlainText(
                    tag="plain_text",
                    content=f"📰 {self.HEADER_LABEL} — {record['date']}",
                ),
            },
            elements=list(self._elements),
        )


def build_card(record: DigestRecord, report_url: Optional[str] = None) -> CardDocument:
    """Builds a card with a fresh CardBuilder."""
    return CardBuilder().build(record, report_url)
