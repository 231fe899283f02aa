"""Unit tests for the card builder."""

import json
import unittest

from digest_card.parsers.markdown import MarkdownDigestParser
from digest_card.services.card_builder import CardBuilder, build_card


def make_article(title="Title", summary="Short summary.", reason="Why", keywords="k"):
    return {
        "rank": 1,
        "title": title,
        "link": f"http://example.com/{title}",
        "source": "Blog",
        "score": 22,
        "category": "AI",
        "summary": summary,
        "reason": reason,
        "keywords": keywords,
    }


def make_record(articles=None, highlights="Today in AI", total=12):
    return {
        "date": "2024-03-01",
        "highlights": highlights,
        "top_articles": articles if articles is not None else [make_article()],
        "total_articles": total,
        "categories": {},
    }


def contents(card):
    return [
        element["text"]["content"]
        for element in card["elements"]
        if element["tag"] == "div"
    ]


class TestCardBuilder(unittest.TestCase):
    def test_header_and_config(self):
        card = build_card(make_record())
        self.assertEqual(card["config"], {"wide_screen_mode": True})
        self.assertEqual(card["header"]["template"], "blue")
        self.assertEqual(
            card["header"]["title"],
            {"tag": "plain_text", "content": "📰 AI 博客每日精选 — 2024-03-01"},
        )

    def test_element_order(self):
        card = build_card(make_record(), "http://report")
        tags = [element["tag"] for element in card["elements"]]
        self.assertEqual(
            tags,
            ["div", "div", "hr", "div"]
            + ["div", "div", "div", "div", "div", "hr"]
            + ["div", "div", "hr", "action"],
        )
        self.assertEqual(
            contents(card),
            [
                "**📝 今日看点**",
                "Today in AI",
                "**🏆 今日必读 Top 3**",
                "🥇 **[Title](http://example.com/Title)**",
                "📰 Blog · ⭐ 22/30 · AI",
                "> Short summary.",
                "💡 *Why*",
                "🏷️ k",
                "**📊 数据概览**",
                "📄 文章总数: 12 篇",
            ],
        )

    def test_report_button(self):
        card = build_card(make_record(), "http://report")
        self.assertEqual(
            card["elements"][-1],
            {
                "tag": "action",
                "actions": [
                    {
                        "tag": "button",
                        "text": {"tag": "plain_text", "content": "查看完整报告"},
                        "type": "primary",
                        "url": "http://report",
                    }
                ],
            },
        )

    def test_no_report_url_no_action(self):
        card = build_card(make_record())
        self.assertNotIn("action", [element["tag"] for element in card["elements"]])
        self.assertEqual(card["elements"][-1]["text"]["content"], "📄 文章总数: 12 篇")

    def test_empty_highlights_placeholder(self):
        card = build_card(make_record(highlights=""))
        self.assertEqual(contents(card)[1], "今日精选技术文章已生成，请查看详细报告。")

    def test_only_first_three_articles(self):
        articles = [make_article(title=f"T{i}") for i in range(5)]
        card = build_card(make_record(articles=articles))
        titles = [c for c in contents(card) if "**[" in c]
        self.assertEqual(
            titles,
            [
                "🥇 **[T0](http://example.com/T0)**",
                "🥈 **[T1](http://example.com/T1)**",
                "🥉 **[T2](http://example.com/T2)**",
            ],
        )

    def test_parsed_four_articles_build_three(self):
        text = "## 🏆 今日必读\n"
        for medal, title in (("🥇", "A"), ("🥈", "B"), ("🥉", "C"), ("", "D")):
            text += (
                f"{medal} **[{title}](http://{title})**\n"
                f"📰 Blog · ⭐ 10/30 · AI\n"
                f"> About {title}\n"
                f"🏷️ tag\n"
            )
        record = MarkdownDigestParser().parse(text)
        self.assertEqual(len(record["top_articles"]), 4)

        card = build_card(record)
        titles = [c for c in contents(card) if "**[" in c]
        self.assertEqual(
            titles,
            [
                "🥇 **[A](http://A)**",
                "🥈 **[B](http://B)**",
                "🥉 **[C](http://C)**",
            ],
        )

    def test_medal_follows_position_not_rank(self):
        first = make_article(title="Second")
        first["rank"] = 2
        card = build_card(make_record(articles=[first]))
        self.assertIn("🥇 **[Second](http://example.com/Second)**", contents(card))

    def test_numeric_label_beyond_medals(self):
        builder = CardBuilder()
        builder._render_article(3, make_article(title="Fourth"))
        self.assertEqual(
            builder._elements[0]["text"]["content"],
            "4. **[Fourth](http://example.com/Fourth)**",
        )

    def test_no_articles(self):
        card = build_card(make_record(articles=[], total=0))
        self.assertEqual(len(card["elements"]), 6)

    def test_long_summary_truncated(self):
        card = build_card(make_record(articles=[make_article(summary="a" * 151)]))
        self.assertIn("> " + "a" * 150 + "...", contents(card))

    def test_summary_at_limit_verbatim(self):
        card = build_card(make_record(articles=[make_article(summary="b" * 150)]))
        self.assertIn("> " + "b" * 150, contents(card))
        self.assertFalse(any(c.endswith("...") for c in contents(card)))

    def test_empty_reason_and_keywords_omitted(self):
        card = build_card(make_record(articles=[make_article(reason="", keywords="")]))
        self.assertFalse(any(c.startswith("💡") for c in contents(card)))
        self.assertFalse(any(c.startswith("🏷️") for c in contents(card)))
        self.assertEqual(len(card["elements"]), 6 + 4)

    def test_builder_reuse_starts_fresh(self):
        builder = CardBuilder()
        first = builder.build(make_record())
        second = builder.build(make_record())
        self.assertEqual(first, second)

    def test_parse_and_build_deterministic(self):
        text = (
            "# Digest — 2024-03-01\n"
            "## 🏆 今日必读\n"
            "🥇 **[A](http://a)**\n"
            "📰 S · ⭐ 3/30 · C\n"
            "> sum\n"
        )
        runs = [
            json.dumps(build_card(MarkdownDigestParser().parse(text)), ensure_ascii=False)
            for _ in range(2)
        ]
        self.assertEqual(runs[0], runs[1])


if __name__ == "__main__":
    unittest.main()
