"""
Tests for the critic agent.
"""

import json
from datetime import date, datetime

import pytest

from shared.agents import CriticAgent
from shared.exceptions import ResponseParseError
from shared.schemas.pipeline import (
    CriticResult,
    DailyStory,
    FormattedEvent,
    Issue,
    IssueType,
)

STORY = DailyStory(date=date(2025, 1, 1), narrative="Coffee with Sam tomorrow at 2pm.")


class TestReview:
    """Tests for CriticAgent.review."""

    @pytest.mark.asyncio
    async def test_parses_review(self, make_client, make_responder):
        reply = json.dumps(
            {
                "quality_score": 5.5,
                "issues": [
                    {
                        "item_title": "Coffee",
                        "issue_type": "WRONG_DATE",
                        "description": "Should be tomorrow",
                        "suggested_fix": "2025-01-02",
                    },
                    {"item_title": "Lunch", "issue_type": "unclear", "description": "Too vague"},
                ],
                "missing_items": ["Send slides"],
                "should_retry": True,
            }
        )
        responder = make_responder({"critic": reply})
        client, provider = make_client(responder)
        events = [FormattedEvent(title="Coffee", start_date=datetime(2025, 1, 1, 14, 0))]

        result = await CriticAgent(client).review(STORY, [], events, [])

        assert result.quality_score == 5.5
        assert result.issues[0].issue_type is IssueType.WRONG_DATE
        assert result.issues[1].issue_type is IssueType.VAGUE
        assert result.missing_items == ["Send slides"]
        assert result.should_retry is True

        prompt = responder.prompts["critic"][0]
        assert "- Coffee @ 2025-01-01T14:00:00 [medium]" in prompt
        assert "EXTRACTED TASKS:\n(none)" in prompt
        assert provider.calls[0]["temperature"] == 0.1

    @pytest.mark.asyncio
    async def test_out_of_range_score(self, make_client, make_responder):
        reply = json.dumps({"quality_score": 12, "should_retry": False})
        client, _ = make_client(make_responder({"critic": reply}))

        with pytest.raises(ResponseParseError):
            await CriticAgent(client).review(STORY, [], [], [])


class TestGenerateFeedback:
    """Tests for CriticAgent.generate_feedback."""

    def test_full_feedback(self):
        result = CriticResult(
            quality_score=4.0,
            issues=[
                Issue(
                    item_title="Coffee",
                    issue_type=IssueType.WRONG_DATE,
                    description="Date is off",
                    suggested_fix="Use 2025-01-02",
                ),
                Issue(item_title="Lunch", issue_type=IssueType.VAGUE, description="No time"),
            ],
            missing_items=["Send slides"],
            should_retry=True,
        )

        assert CriticAgent.generate_feedback(result) == (
            "Quality score: 4.0/10\n\n"
            "ISSUES TO FIX:\n"
            "- [wrong_date] Coffee: Date is off → Use 2025-01-02\n"
            "- [vague] Lunch: No time\n"
            "\nMISSING ITEMS (please extract these):\n"
            "- Send slides\n"
        )

    def test_score_only(self):
        result = CriticResult(quality_score=9.0)

        assert CriticAgent.generate_feedback(result) == "Quality score: 9.0/10\n\n"
