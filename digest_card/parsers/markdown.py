"""
Markdown digest parser.

This module provides the MarkdownDigestParser class for turning the
markdown output of the AI daily digest into a DigestRecord. The parser is
lenient: lines it does not recognise are skipped and missing sections fall
back to defaults, so template changes upstream degrade the card instead of
breaking it.
"""

import datetime
import enum
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from digest_card.models import Article, DigestRecord
from digest_card.parsers.base import DigestParser

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"# .* — (\d{4}-\d{2}-\d{2})")
HIGHLIGHTS_HEADING = "## 📝 今日看点"
HIGHLIGHTS_END = "---"
TOP_HEADING_PATTERN = re.compile(r"^## 🏆 今日必读")
SECTION_END_PATTERN = re.compile(r"^## [^🏆]")
TOTAL_PATTERN = re.compile(r"\| (\d+) 篇 → (\d+) 篇 \|")

TITLE_PATTERN = re.compile(r"^🥇?🥈?🥉? \*\*\[(.+?)\]\((.+?)\)\*\*")
META_PATTERN = re.compile(r"📰 (.+?) · ⭐ (\d+)/\d+ · (.+)")
SUMMARY_PATTERN = re.compile(r"^> (.*)", re.DOTALL)
REASON_PATTERN = re.compile(r"💡 \*\*(.+?)\*\*: (.+)")
KEYWORDS_PATTERN = re.compile(r"🏷️ (.+)")

MEDAL_RANKS = {"🥇": 1, "🥈": 2, "🥉": 3}


class ArticleField(enum.Enum):
    """The last article field seen while scanning the top-articles block."""

    NONE = "none"
    TITLE = "title"
    META = "meta"
    SUMMARY = "summary"
    REASON = "reason"
    KEYWORDS = "keywords"


PendingArticle = Dict[str, Any]
Transition = Tuple[ArticleField, PendingArticle, Optional[Article]]
Handler = Callable[[re.Match[str], PendingArticle], Transition]


def _today() -> str:
    return datetime.datetime.now(datetime.timezone.utc).date().isoformat()


def finalize_article(pending: PendingArticle) -> Optional[Article]:
    """Turns a pending accumulation into an Article, or None without a title."""
    if not pending.get("title"):
        return None
    return Article(
        rank=pending.get("rank", 0),
        title=pending["title"],
        link=pending.get("link", ""),
        source=pending.get("source", ""),
        score=pending.get("score", 0),
        category=pending.get("category", ""),
        summary=pending.get("summary", ""),
        reason=pending.get("reason", ""),
        keywords=pending.get("keywords", ""),
    )


def _rank_of(line: str) -> int:
    """Ranks by the first medal found anywhere in the line, gold first."""
    return next((rank for medal, rank in MEDAL_RANKS.items() if medal in line), 0)


def _on_title(match: re.Match[str], pending: PendingArticle) -> Transition:
    emitted = finalize_article(pending)
    fresh = {
        "rank": _rank_of(match.string),
        "title": match.group(1),
        "link": match.group(2),
    }
    return ArticleField.TITLE, fresh, emitted


def _on_meta(match: re.Match[str], pending: PendingArticle) -> Transition:
    pending.update(
        source=match.group(1), score=int(match.group(2)), category=match.group(3)
    )
    return ArticleField.META, pending, None


def _on_summary(match: re.Match[str], pending: PendingArticle) -> Transition:
    pending["summary"] = match.group(1)
    return ArticleField.SUMMARY, pending, None


def _on_reason(match: re.Match[str], pending: PendingArticle) -> Transition:
    # The bold label ("推荐理由" and the like) is dropped
    pending["reason"] = match.group(2)
    return ArticleField.REASON, pending, None


def _on_keywords(match: re.Match[str], pending: PendingArticle) -> Transition:
    pending["keywords"] = match.group(1)
    emitted = finalize_article(pending)
    if emitted is not None:
        pending = {}
    return ArticleField.KEYWORDS, pending, emitted


# Evaluated top to bottom; the first matching rule consumes the line.
# The middle element is the field the scan must be in for the rule to apply.
ARTICLE_RULES: List[Tuple[re.Pattern[str], Optional[ArticleField], Handler]] = [
    (TITLE_PATTERN, None, _on_title),
    (META_PATTERN, ArticleField.TITLE, _on_meta),
    (SUMMARY_PATTERN, ArticleField.META, _on_summary),
    (REASON_PATTERN, None, _on_reason),
    (KEYWORDS_PATTERN, None, _on_keywords),
]


def advance(
    line: str, field: ArticleField, pending: PendingArticle
) -> Optional[Transition]:
    """
    Feeds one line of the top-articles block to the article state machine.

    Returns the new field, the (possibly new) pending accumulation and the
    article finalized by this line, or None when no rule matched.
    """
    for pattern, required, handler in ARTICLE_RULES:
        if required is not None and field is not required:
            continue
        match = pattern.search(line)
        if match:
            return handler(match, pending)
    return None


def _valid_date(value: str) -> bool:
    try:
        datetime.date.fromisoformat(value)
    except ValueError:
        return False
    return True


class MarkdownDigestParser(DigestParser):
    """Parses the markdown digest produced by the AI daily digest job."""

    def parse(self, text: str) -> DigestRecord:
        """Parses a markdown digest into a DigestRecord in a single pass."""
        record = DigestRecord(
            date=_today(),
            highlights="",
            top_articles=[],
            total_articles=0,
            categories={},
        )
        highlights: List[str] = []
        in_highlights = False
        in_top = False
        field = ArticleField.NONE
        pending: PendingArticle = {}

        for line in text.split("\n"):
            date_match = DATE_PATTERN.search(line)
            if date_match:
                if _valid_date(date_match.group(1)):
                    record["date"] = date_match.group(1)
                else:
                    logger.debug("Ignoring invalid date %s", date_match.group(1))

            if line.startswith(HIGHLIGHTS_HEADING):
                in_highlights = True
                continue
            if in_highlights and line.startswith(HIGHLIGHTS_END):
                in_highlights = False
                continue
            if in_highlights and line.strip() and not line.startswith("##"):
                highlights.append(line + "\n")

            if TOP_HEADING_PATTERN.match(line):
                in_top = True
                continue
            if in_top and SECTION_END_PATTERN.match(line):
                # A pending article without keywords stays pending here
                in_top = False
                continue

            if in_top:
                transition = advance(line, field, pending)
                if transition is not None:
                    field, pending, emitted = transition
                    if emitted is not None:
                        record["top_articles"].append(emitted)
                    continue

            total_match = TOTAL_PATTERN.search(line)
            if total_match:
                record["total_articles"] = int(total_match.group(2))

        last = finalize_article(pending)
        if last is not None:
            record["top_articles"].append(last)

        record["highlights"] = "".join(highlights).strip()
        logger.info(
            "Parsed digest for %s: %d top articles, %d total.",
            record["date"],
            len(record["top_articles"]),
            record["total_articles"],
        )
        return record
