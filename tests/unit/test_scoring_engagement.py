"""Tests for engagement scoring."""

from worker.scoring.engagement import has_hook, score_engagement

ENGAGING = """Did you know that most leaks start small?

Here are the warning signs:

- Damp floors
- Rusty water

1. Turn off the power
2. Call a plumber

This is **important** for safety. Contact us for a free inspection."""


class TestScoreEngagement:
    """Tests for score_engagement."""

    def test_every_signal(self) -> None:
        result = score_engagement(ENGAGING)

        assert result.has_hook
        assert result.has_question
        assert result.has_bullet_points
        assert result.has_numbered_list
        assert result.has_emphasis
        assert result.has_cta
        assert result.score == 100

    def test_flat_text(self) -> None:
        result = score_engagement("Water heaters heat water. They are common in homes.")

        assert result.components == {
            "hook": 0,
            "question": 0,
            "bullet_points": 0,
            "numbered_list": 0,
            "emphasis": 0,
            "cta": 0,
            "short_paragraphs": 15,
        }
        assert result.score == 15

    def test_medium_paragraphs(self) -> None:
        result = score_engagement("word " * 100)
        assert result.components["short_paragraphs"] == 8

    def test_long_paragraphs(self) -> None:
        result = score_engagement("word " * 150)
        assert result.components["short_paragraphs"] == 0

    def test_empty(self) -> None:
        assert score_engagement("").score == 0


class TestHasHook:
    def test_question_opener(self) -> None:
        assert has_hook("Why do water heaters fail? Mostly sediment.")

    def test_statistic_opener(self) -> None:
        assert has_hook("Over 40% of homes have an old heater.")

    def test_phrase_opener(self) -> None:
        assert has_hook("Imagine never running out of hot water.")

    def test_plain_opener(self) -> None:
        assert not has_hook("Water heaters are appliances. Did you know?")
        assert not has_hook("")
