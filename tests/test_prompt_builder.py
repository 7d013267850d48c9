from trustscore.models import VerifiedSource
from trustscore.prompts import FULL_SYSTEM_PROMPT, COMPACT_SYSTEM_PROMPT, MINIMAL_SYSTEM_PROMPT
from trustscore.services.prompt_builder import (
    extract_key_claims,
    system_prompt_for_attempt,
    build_verification_prompt,
)


class TestExtractKeyClaims:
    def test_keeps_evidentiary_sentences(self):
        response = (
            "Photosynthesis is important. It produces 90% of oxygen. "
            "According to the lecture, plants are green!"
        )
        assert extract_key_claims(response) == (
            "It produces 90% of oxygen. According to the lecture, plants are green."
        )

    def test_citation_marker_counts(self):
        response = "Plants are green [Source: Lecture 3]. The sky is blue."
        assert extract_key_claims(response) == "Plants are green [Source: Lecture 3]."

    def test_fallback_short_response(self):
        assert extract_key_claims("Plants are green") == "Plants are green"

    def test_fallback_long_response_is_elided(self):
        response = "a" * 600
        assert extract_key_claims(response) == "a" * 500 + "..."

    def test_empty_response(self):
        assert extract_key_claims("") == ""


class TestSystemPromptForAttempt:
    def test_degrades_with_attempt(self):
        assert system_prompt_for_attempt(1) == FULL_SYSTEM_PROMPT
        assert system_prompt_for_attempt(2) == COMPACT_SYSTEM_PROMPT
        assert system_prompt_for_attempt(3) == MINIMAL_SYSTEM_PROMPT

    def test_beyond_last_attempt_stays_minimal(self):
        assert system_prompt_for_attempt(7) == MINIMAL_SYSTEM_PROMPT

    def test_prompts_shrink(self):
        assert len(FULL_SYSTEM_PROMPT) > len(COMPACT_SYSTEM_PROMPT) > len(MINIMAL_SYSTEM_PROMPT)


class TestBuildVerificationPrompt:
    def test_lists_every_source(self, verified_source, unverified_source):
        claim = "It produces 90% of the oxygen in the atmosphere."
        prompt = build_verification_prompt(claim, [verified_source, unverified_source], 1)

        assert prompt.system_prompt == FULL_SYSTEM_PROMPT
        assert prompt.user_prompt.startswith("VERIFICATION TASK")
        assert "Chatbot Claims:\nIt produces 90% of the oxygen in the atmosphere." in prompt.user_prompt
        assert "1. Lecture 3 - Photosynthesis.pdf" in prompt.user_prompt
        assert "Status: verified" in prompt.user_prompt
        assert "Page: 4" in prompt.user_prompt
        assert "90% of the oxygen" in prompt.user_prompt
        assert "2. Example Encyclopedia" in prompt.user_prompt
        assert "ERROR: Access forbidden (403) - site blocks bots" in prompt.user_prompt
        assert prompt.user_prompt.rstrip().endswith("(no markdown, no extra text).")

    def test_missing_error_text(self, internet_claim):
        source = VerifiedSource(claimed=internet_claim, verification_status="unverified")
        prompt = build_verification_prompt("Some claim here.", [source], 1)
        assert "ERROR: Could not verify" in prompt.user_prompt

    def test_excerpt_budget_shrinks_on_later_attempts(self, course_material_claim):
        source = VerifiedSource(
            claimed=course_material_claim,
            actual_content="Background text without the figure. " * 200,
            verification_status="verified",
        )
        claim = "It is so."

        first = build_verification_prompt(claim, [source], 1).user_prompt
        second = build_verification_prompt(claim, [source], 2).user_prompt
        third = build_verification_prompt(claim, [source], 3).user_prompt

        assert len(first) > len(second) > len(third)

    def test_control_characters_removed_from_content(self, course_material_claim):
        source = VerifiedSource(
            claimed=course_material_claim,
            actual_content="Clean\x00 text\x07 with 42% figures.",
            verification_status="verified",
        )
        prompt = build_verification_prompt("About 42% of it.", [source], 1)
        assert "\x00" not in prompt.user_prompt
        assert "\x07" not in prompt.user_prompt
