"""
AI verdict tests — prompt formatting and free-text parsing.
"""

import pytest

from finsafe.ai_verdict import DEFAULT_AI_TIPS, ai_verdict, parse_ai_response
from finsafe.llm import LLMProvider


SCAM_REPLY = """Explanation
This message is likely a scam. It promises an instant loan without documents
and pushes you to click an unknown link.

Safety Tips
- Never pay processing fees upfront
- Verify with your bank directly
• Do not click unknown links
* Report the number at cybercrime.gov.in
"""


class EchoLLM(LLMProvider):
    def __init__(self, reply):
        self.reply = reply
        self.prompts = []

    async def generate(self, prompt, system_instruction=None, temperature=0.7):
        self.prompts.append(prompt)
        return self.reply


class TestParseExplanation:
    def test_sections_split(self):
        result = parse_ai_response(SCAM_REPLY)
        assert result["explanation"].startswith("This message is likely a scam.")
        assert "and pushes you" in result["explanation"]
        assert "\n" not in result["explanation"]

    def test_inline_heading(self):
        result = parse_ai_response("Explanation: Looks like a normal bank alert.\nSafety Tips\n- Stay alert")
        assert result["explanation"] == "Looks like a normal bank alert."

    def test_markdown_headings(self):
        result = parse_ai_response(
            "## Explanation\nThis is a fraud attempt.\n\n**Safety Tips**\n1. Ignore it\n2. Block the sender"
        )
        assert result["explanation"] == "This is a fraud attempt."
        assert result["safetyTips"] == ["Ignore it", "Block the sender"]

    def test_bold_inline_heading(self):
        result = parse_ai_response("**Explanation:** Suspicious request for OTP.")
        assert result["explanation"] == "Suspicious request for OTP."


class TestParseTips:
    def test_bullets(self):
        result = parse_ai_response(SCAM_REPLY)
        assert result["safetyTips"] == [
            "Never pay processing fees upfront",
            "Verify with your bank directly",
            "Do not click unknown links",
            "Report the number at cybercrime.gov.in",
        ]

    def test_non_bullet_lines_ignored(self):
        result = parse_ai_response("Safety Tips\nHere are some tips:\n- One\n")
        assert result["safetyTips"] == ["One"]

    def test_tips_starting_with_heading_words_stay_tips(self):
        result = parse_ai_response(
            "Explanation\nA fake refund request.\n\nSafety Tips\n"
            "* Safety tips for UPI: never enter your PIN to receive money\n"
            "- Explanation of fees should come from the bank itself\n"
            "1. Safety tips are on the official app\n"
        )
        assert result["explanation"] == "A fake refund request."
        assert result["safetyTips"] == [
            "Safety tips for UPI: never enter your PIN to receive money",
            "Explanation of fees should come from the bank itself",
            "Safety tips are on the official app",
        ]

    def test_bold_heading_is_not_a_bullet(self):
        result = parse_ai_response("**Safety Tips**\n* Block the sender")
        assert result["safetyTips"] == ["Block the sender"]

    def test_missing_tips_defaults(self):
        result = parse_ai_response("Explanation\nNothing unusual here.")
        assert result["safetyTips"] == list(DEFAULT_AI_TIPS)

    def test_empty_reply(self):
        result = parse_ai_response("")
        assert result["explanation"] == ""
        assert result["verdict"] == "Possibly Safe"
        assert result["safetyTips"] == list(DEFAULT_AI_TIPS)


class TestVerdict:
    @pytest.mark.parametrize("explanation,verdict,badge", [
        ("This is likely a scam.", "Likely Scam", "danger"),
        ("Probably fraud targeting students.", "Likely Scam", "danger"),
        ("This is a high risk malicious link.", "Likely Scam", "danger"),
        ("The message has suspicious wording.", "Suspicious", "warning"),
        ("A dangerous request for money.", "Suspicious", "warning"),
        ("A routine balance notification.", "Possibly Safe", "safe"),
    ])
    def test_keyword_cascade(self, explanation, verdict, badge):
        result = parse_ai_response(f"Explanation\n{explanation}")
        assert result["verdict"] == verdict
        assert result["badgeClass"] == badge
        assert result["verdictText"]

    def test_same_shape_as_engine_summary(self):
        result = parse_ai_response(SCAM_REPLY)
        assert set(result) == {"verdict", "verdictText", "badgeClass", "explanation", "safetyTips"}


class TestAiVerdict:
    @pytest.mark.asyncio
    async def test_prompt_contains_message(self):
        llm = EchoLLM(SCAM_REPLY)
        result = await ai_verdict("Win Rs 10 lakh now", llm)
        assert 'The message to analyze: "Win Rs 10 lakh now"' in llm.prompts[0]
        assert result["verdict"] == "Likely Scam"

    @pytest.mark.asyncio
    async def test_message_with_braces(self):
        llm = EchoLLM(SCAM_REPLY)
        await ai_verdict("pay {amount} now", llm)
        assert "pay {amount} now" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self):
        class FailingLLM(LLMProvider):
            async def generate(self, prompt, **kwargs):
                raise RuntimeError("LLM is down")

        with pytest.raises(RuntimeError):
            await ai_verdict("hello", FailingLLM())
