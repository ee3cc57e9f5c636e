from __future__ import annotations

from langchain_core.prompts import PromptTemplate

RELEVANCE_TEMPLATE = PromptTemplate.from_template(
    """\
You are an information retrieval expert. Judge how relevant the document below is
to the query, using ONLY its title and keywords.

Query: {query}
Title: {title}
Keywords: {keywords}

Return a relevance score between 0 and 1, the keywords that matched the query,
and a one-sentence reasoning.

SCORING GUIDE:
- 1.0: exact match, directly related
- 0.7-0.9: strongly related
- 0.4-0.6: moderately related
- 0.1-0.3: weakly related
- 0.0: unrelated
"""
)

MERGE_TEMPLATE = PromptTemplate.from_template(
    """\
You are an expert document editor. Merge the two pieces of content below.

ORIGINAL CONTENT:
{original_content}

CONTENT TO ADD:
{additional_content}

RULES:
1. Integrate duplicated or overlapping information instead of repeating it.
2. Keep the structure consistent.
3. Preserve the Markdown formatting.
4. Keep a logical reading order.

Output ONLY the merged content:
"""
)

SOURCES_REQUIRED = "Cite the references you used by their number, e.g. [1]."
SOURCES_OPTIONAL = "You do not need to cite the references."

RESPONSE_TEMPLATE = PromptTemplate.from_template(
    """\
You are a knowledgeable assistant. Answer the question using the reference
information provided.

## Question
{query}

## References
{context}

## Requirements
- {sources_instruction}

Give an accurate and useful answer. Use only the references; if they are not
sufficient, say so.
"""
)

TITLE_TEMPLATE = PromptTemplate.from_template(
    """\
Write a title that describes the content below concisely and completely.
Make it easy to find later. Output the title only.

## Content
{content}
"""
)

KEYWORDS_TEMPLATE = PromptTemplate.from_template(
    """\
Extract keywords from the content below. Understand what the text is for and
cover it as precisely as possible, but keep the list short and of high quality
so the document is easy to find later.
Output the keywords as a single comma-separated line.

## Content
{content}
"""
)


def render_relevance_prompt(query: str, title: str, keywords: list[str]) -> str:
    return RELEVANCE_TEMPLATE.format(query=query, title=title, keywords=", ".join(keywords))


def render_merge_prompt(original_content: str, additional_content: str) -> str:
    return MERGE_TEMPLATE.format(
        original_content=original_content, additional_content=additional_content
    )


def render_response_prompt(query: str, context: str, include_sources: bool) -> str:
    return RESPONSE_TEMPLATE.format(
        query=query,
        context=context,
        sources_instruction=SOURCES_REQUIRED if include_sources else SOURCES_OPTIONAL,
    )


def render_title_prompt(content: str) -> str:
    return TITLE_TEMPLATE.format(content=content)


def render_keywords_prompt(content: str) -> str:
    return KEYWORDS_TEMPLATE.format(content=content)
