"""
Test Suite: AI Fallback for AdvisorService

Verifies that redemption advice degrades gracefully when:
1. No OpenAI client is configured
2. The API call times out
3. The API returns an error
4. The API returns an empty message

Expected behavior:
- API returns 200 OK (not 500)
- Response includes is_fallback: True and a template model tag
- Summary contains template text built from engine numbers
- The fallback is logged
"""

import logging
import unittest
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from openai import APIError, APITimeoutError

from app.main import app
from app.services.advisor_service import AdvisorService, parse_recommendations
from app.schemas.ai_schemas import AdviceRequest
from engine.catalog import load_default_catalog


ADVICE_PAYLOAD = {
    "balances": [{"program_id": "chase-ur", "balance": 80000}],
    "destination": "Japan",
}


class TestAdvisorFallback(unittest.TestCase):
    """AI advice endpoint never fails because of the LLM"""

    def setUp(self):
        self.client = TestClient(app)

    def test_no_client_uses_template(self):
        with patch("app.services.advisor_service.openai_client", None):
            response = self.client.post("/api/v1/explore/advice", json=ADVICE_PAYLOAD)

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["is_fallback"])
        self.assertEqual(data["model_used"], "template")
        self.assertIn("Great news! With your 80,000 total points", data["summary"])
        self.assertIn("to Japan right now", data["summary"])
        self.assertEqual(data["recommendations"][0]["title"], "Best Option for Japan")

    def test_api_returns_200_when_openai_timeout(self):
        with patch("app.services.advisor_service.openai_client") as mock_client:
            mock_client.chat.completions.create.side_effect = APITimeoutError(
                request=MagicMock()
            )

            response = self.client.post("/api/v1/explore/advice", json=ADVICE_PAYLOAD)

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["is_fallback"])
        self.assertEqual(data["model_used"], "template_timeout")
        self.assertTrue(data["summary"])

    def test_api_returns_200_when_openai_error(self):
        with patch("app.services.advisor_service.openai_client") as mock_client:
            mock_client.chat.completions.create.side_effect = APIError(
                message="Rate limit exceeded",
                request=MagicMock(),
                body=None
            )

            response = self.client.post("/api/v1/explore/advice", json=ADVICE_PAYLOAD)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["model_used"], "template_error")

    def test_empty_llm_message_falls_back(self):
        with patch("app.services.advisor_service.openai_client") as mock_client:
            mock_response = MagicMock()
            mock_response.choices = [MagicMock()]
            mock_response.choices[0].message.content = "   "
            mock_client.chat.completions.create.return_value = mock_response

            response = self.client.post("/api/v1/explore/advice", json=ADVICE_PAYLOAD)

        self.assertEqual(response.json()["model_used"], "template_empty")

    def test_unexpected_exception_falls_back(self):
        with patch("app.services.advisor_service.openai_client") as mock_client:
            mock_client.chat.completions.create.side_effect = RuntimeError("boom")

            response = self.client.post("/api/v1/explore/advice", json=ADVICE_PAYLOAD)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["model_used"], "template_exception")

    def test_successful_llm_response(self):
        with patch("app.services.advisor_service.openai_client") as mock_client:
            mock_response = MagicMock()
            mock_response.choices = [MagicMock()]
            mock_response.choices[0].message.content = (
                "You can book ANA First right now.\n"
                "1. **Best option**: Transfer 72,500 Chase points to Virgin Atlantic.\n"
                "2. Keep earning: A second card bonus covers Singapore Suites."
            )
            mock_client.chat.completions.create.return_value = mock_response

            response = self.client.post("/api/v1/explore/advice", json=ADVICE_PAYLOAD)

        data = response.json()
        self.assertFalse(data["is_fallback"])
        self.assertEqual(data["summary"].splitlines()[0], "You can book ANA First right now.")
        self.assertEqual(
            [r["title"] for r in data["recommendations"]],
            ["Best option", "Keep earning"],
        )

    def test_no_affordable_awards_summary(self):
        with patch("app.services.advisor_service.openai_client", None):
            response = self.client.post(
                "/api/v1/explore/advice",
                json={"balances": [{"program_id": "amex-mr", "balance": 1200}], "destination": "Europe"},
            )

        data = response.json()
        self.assertTrue(data["summary"].startswith("You have 1,200 points across your programs."))
        self.assertIn("premium Europe flights", data["summary"])
        self.assertEqual(data["recommendations"][0]["title"], "Best Option for Europe")


class TestPromptAndParsing(unittest.TestCase):

    def setUp(self):
        self.service = AdvisorService(load_default_catalog())

    def test_prompt_contains_engine_facts(self):
        context = self.service.build_context(AdviceRequest(**ADVICE_PAYLOAD))

        prompt = self.service.build_prompt(context)

        self.assertIn("- Chase Ultimate Rewards: 80,000 points", prompt)
        self.assertIn("DESIRED DESTINATION: Japan", prompt)
        self.assertIn("ANA First Class to Japan: 72,500 points (24.83 cpp) - CAN AFFORD", prompt)
        self.assertIn("to get to Japan", prompt)
        self.assertLessEqual(prompt.count(" points ("), 5)

    def test_fallback_summary_is_built_once(self):
        with patch("app.services.advisor_service.openai_client", None), \
                patch.object(AdvisorService, "_template_summary", return_value="Template text") as summary:
            response = self.service.generate_advice(AdviceRequest(**ADVICE_PAYLOAD))

        self.assertEqual(response.summary, "Template text")
        self.assertEqual(summary.call_count, 1)

    def test_parse_recommendations_limits_to_three(self):
        text = "\n".join(f"- Item {i}: detail {i}" for i in range(5))

        items = parse_recommendations(text)

        self.assertEqual(len(items), 3)
        self.assertEqual(items[0].title, "Item 0")
        self.assertEqual(items[0].description, "detail 0")

    def test_parse_continuation_lines(self):
        items = parse_recommendations("1. A plain line without a colon\ncontinues here")

        self.assertEqual(items[0].title, "A plain line without a colon")
        self.assertEqual(items[0].description, "A plain line without a colon continues here")


@pytest.fixture
def test_client():
    return TestClient(app)


def test_logging_verification_on_timeout(test_client, caplog):
    """A timeout is logged at WARNING before the template is returned."""
    with patch("app.services.advisor_service.openai_client") as mock_client:
        mock_client.chat.completions.create.side_effect = APITimeoutError(
            request=MagicMock()
        )

        with caplog.at_level(logging.WARNING):
            response = test_client.post("/api/v1/explore/advice", json=ADVICE_PAYLOAD)

    assert response.status_code == 200
    warning_logs = [r for r in caplog.records if r.levelname == "WARNING"]
    assert any("timeout" in r.getMessage().lower() for r in warning_logs)


def test_audit_entry_is_logged(test_client, caplog):
    with patch("app.services.advisor_service.openai_client", None):
        with caplog.at_level(logging.INFO, logger="app.services.advisor_service"):
            test_client.post(
                "/api/v1/explore/advice",
                json=ADVICE_PAYLOAD,
                headers={"x-user-id": "42"},
            )

    audit = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Advice audit")]
    assert audit
    assert '"user_id":"42"' in audit[0]
    assert '"model_used":"template"' in audit[0]
