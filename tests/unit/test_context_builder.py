"""Unit tests for context assembly and prompt templates."""

from core.types import Chunk
from retrieval import prompts
from retrieval.context_builder import build_context, build_summary_content


def chunk(text: str) -> Chunk:
    return Chunk(id=text[:8], text=text)


class TestBuildContext:
    """Tests for numbered fragment context."""

    def test_fragments_are_numbered_and_separated(self):
        context, count = build_context([chunk("alpha"), chunk("beta")], 1000)

        assert context == "[Fragment 1]\nalpha\n\n[Fragment 2]\nbeta"
        assert count == 2

    def test_stops_before_exceeding_budget(self):
        chunks = [chunk("a" * 40), chunk("b" * 40), chunk("c" * 40)]

        context, count = build_context(chunks, 110)

        assert count == 2
        assert len(context) <= 110
        assert "c" not in context

    def test_oversized_first_fragment_is_cut(self):
        context, count = build_context([chunk("x" * 500)], 100)

        assert count == 1
        assert len(context) == 100
        assert context.startswith("[Fragment 1]\n")

    def test_empty(self):
        assert build_context([], 100) == ("", 0)


class TestBuildSummaryContent:
    """Tests for whole-document summary content."""

    def test_joins_with_blank_lines(self):
        content, count = build_summary_content([chunk("one"), chunk("two")], 8000)
        assert content == "one\n\ntwo"
        assert count == 2

    def test_truncates_and_counts_contributors(self):
        chunks = [chunk("a" * 50), chunk("b" * 50), chunk("c" * 50)]

        content, count = build_summary_content(chunks, 60)

        assert len(content) == 60
        assert count == 2


class TestPrompts:
    """Tests for prompt templates."""

    def test_answer_prompt_contains_context_and_question(self):
        prompt = prompts.answer_prompt("[Fragment 1]\nfacts", "What is it?")

        assert "[Fragment 1]\nfacts" in prompt
        assert "User Question: What is it?" in prompt
        assert "explicitly state" in prompt

    def test_summary_prompts(self):
        assert "3-5 sentences" in prompts.text_summary_prompt("body")
        doc_prompt = prompts.document_summary_prompt("content")
        assert "5-8 sentences" in doc_prompt
        assert "Main topic" in doc_prompt

    def test_chat_prompt_without_history(self):
        prompt = prompts.chat_prompt("Hi!")

        assert "Recent Conversation" not in prompt
        assert prompt.endswith("User: Hi!\nAssistant:")

    def test_chat_prompt_with_history(self):
        prompt = prompts.chat_prompt("And now?", "User: a\nAssistant: b")

        assert "Recent Conversation:\nUser: a\nAssistant: b\n\nUser: And now?" in prompt

    def test_braces_in_content_are_safe(self):
        assert "{not a field}" in prompts.text_summary_prompt("{not a field}")
