"""Prompt templates for each oracle role.

Dimension judges get a system prompt naming the axis they grade and a task
prompt with the query, the response and whatever evidence that axis needs.
Every judge is asked for an explicit "Score:" line so the score extractor's
labeled pass usually hits, but nothing depends on the judge complying.
"""

# ---------------------------------------------------------------------------
# Factual Accuracy
# ---------------------------------------------------------------------------

FACTUAL_ACCURACY_SYSTEM = """\
You are a factual accuracy evaluator. Assess whether the claims in a response \
are supported by the supplied knowledge sources. Identify every factual error \
and every claim the sources do not support.
"""

FACTUAL_ACCURACY_TASK = """\
Query: {query}

Response to evaluate:
{response}

Knowledge sources:
{knowledge_text}

Evaluate the factual accuracy of the response.
Give a score from 0.0 (completely inaccurate) to 1.0 (completely accurate) \
on its own line as "Score: <number>", then explain your reasoning and list \
any factual errors or unsupported claims, citing the contradicting source.
"""


# ---------------------------------------------------------------------------
# Reasoning Quality
# ---------------------------------------------------------------------------

REASONING_QUALITY_SYSTEM = """\
You are a reasoning quality evaluator. Assess the logical coherence of a \
response, how well it weighs multiple perspectives, and the quality of its \
inferences.
"""

REASONING_QUALITY_TASK = """\
Query: {query}

Response to evaluate:
{response}

Perspective analyses:
{perspectives_text}

Evaluate the reasoning quality of the response.
Give a score from 0.0 (poor reasoning) to 1.0 (excellent reasoning) on its \
own line as "Score: <number>", then explain your reasoning. Point out logical \
gaps, ignored perspectives and unjustified inferences.
"""


# ---------------------------------------------------------------------------
# Relevance
# ---------------------------------------------------------------------------

RELEVANCE_SYSTEM = """\
You are a relevance evaluator. Assess how directly a response addresses the \
query and whether it contains irrelevant material.
"""

RELEVANCE_TASK = """\
Query: {query}

Response to evaluate:
{response}

Evaluate the relevance of the response to the query.
Give a score from 0.0 (completely irrelevant) to 1.0 (perfectly relevant) on \
its own line as "Score: <number>", then explain your reasoning and identify \
any irrelevant content.
"""


# ---------------------------------------------------------------------------
# Completeness
# ---------------------------------------------------------------------------

COMPLETENESS_SYSTEM = """\
You are a completeness evaluator. Assess whether a response addresses every \
aspect of the query or leaves important elements out.
"""

COMPLETENESS_TASK = """\
Query: {query}

Response to evaluate:
{response}

Evaluate the completeness of the response.
Give a score from 0.0 (very incomplete) to 1.0 (fully complete) on its own \
line as "Score: <number>", then explain your reasoning and list any missing \
elements.
"""


# ---------------------------------------------------------------------------
# Improvement Suggestions
# ---------------------------------------------------------------------------

SUGGESTIONS_SYSTEM = """\
You are an improvement advisor. Based on the evaluations of a response, \
suggest specific, concrete ways to improve it.
"""

SUGGESTIONS_TASK = """\
Query: {query}

Response:
{response}

Evaluations:
{evaluations_text}

Suggest 3-5 specific, distinct improvements that address the weaknesses \
identified in the evaluations. Start each suggestion on a new line as a \
numbered list item ("1. ...").
"""


# ---------------------------------------------------------------------------
# Regeneration
# ---------------------------------------------------------------------------

REGENERATION_SYSTEM = """\
You are a response improvement system. Produce an improved version of a \
response based on evaluation feedback. Keep the core information while \
addressing the identified weaknesses.
"""

REGENERATION_TASK = """\
Query: {query}

Original response:
{original_response}

Improvement suggestions:
{suggestions_text}

Relevant knowledge:
{knowledge_text}

Perspective analyses:
{perspectives_text}

Write an improved response that applies the suggestions while keeping the \
core information. Return only the improved response.
"""


# ---------------------------------------------------------------------------
# Placeholders for missing evidence
# ---------------------------------------------------------------------------

NO_KNOWLEDGE = "No knowledge sources were provided."
NO_PERSPECTIVES = "No perspective analyses were provided."
NO_SUGGESTIONS = "No specific suggestions were produced."
