"""Tests for prompt rendering helpers."""

from __future__ import annotations

from conftest import make_evaluation
from metacog.prompts.formatting import (
    format_evaluations,
    format_knowledge,
    format_perspectives,
    format_suggestions,
)
from metacog.prompts.templates import NO_KNOWLEDGE, NO_PERSPECTIVES, NO_SUGGESTIONS
from metacog.schemas.context import (
    KnowledgeDocument,
    MultiPerspectiveAnalysis,
    PerspectiveResult,
)


class TestFormatKnowledge:
    def test_renders_title_source_content(self):
        docs = (KnowledgeDocument(title="Boiling", content="100 C", source="wiki"),)
        assert format_knowledge(docs) == "--- Boiling ---\nSource: wiki\n100 C"

    def test_source_line_omitted_when_empty(self):
        docs = (KnowledgeDocument(title="T", content="C"),)
        assert format_knowledge(docs) == "--- T ---\nC"

    def test_limit(self, sample_context):
        text = format_knowledge(sample_context.knowledge_results, limit=2)
        assert "Doc 2" in text
        assert "Doc 3" not in text

    def test_empty(self):
        assert format_knowledge(()) == NO_KNOWLEDGE
        assert format_knowledge((KnowledgeDocument(title="T", content="C"),), limit=0) == NO_KNOWLEDGE


class TestFormatPerspectives:
    def test_perspectives_then_synthesis(self):
        analysis = MultiPerspectiveAnalysis(
            perspective_results=(PerspectiveResult(perspective="Legal", analysis="Risky"),),
            synthesis="Proceed carefully",
        )
        assert format_perspectives(analysis) == (
            "--- Legal Perspective ---\nRisky\n\n--- Synthesis ---\nProceed carefully"
        )

    def test_empty(self):
        assert format_perspectives(MultiPerspectiveAnalysis()) == NO_PERSPECTIVES


def test_format_evaluations_block_per_dimension():
    text = format_evaluations(make_evaluation({"relevance": 0.456}))
    blocks = text.split("\n\n")
    assert len(blocks) == 4
    assert blocks[2] == "Relevance (Score: 0.46):\nScore: 0.456"


def test_format_suggestions():
    assert format_suggestions(["a", "b"]) == "- a\n- b"
    assert format_suggestions(()) == NO_SUGGESTIONS
