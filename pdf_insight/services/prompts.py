"""
Prompt templates for document question answering, restructuring and summaries.
"""
from ..data_models import ContentAnalysis, DocumentMetadata, DocumentStructure


QA_SYSTEM_PROMPT = """You are an expert document analyst.
Answer using ONLY information found in the provided document.
Quote the document where it helps and cite pages as "Page X" when the text shows page numbers.
If the answer is not in the document, say "Not found in document"."""

QA_PROMPT_TEMPLATE = """Answer the question using ONLY the document below.

DOCUMENT CONTENT:
{document}

QUESTION: {question}

INSTRUCTIONS:
- Quote exact text from the document where possible
- Do not add assumptions or outside knowledge
- Be precise and direct"""

RESTRUCTURE_SYSTEM_PROMPT = """You restructure extracted document text so it is easier to search and
question. Preserve every fact, number and name from the input. Do not summarize,
do not invent content, and do not use markdown symbols."""

RESTRUCTURE_PROMPT_TEMPLATE = """Reorganize this document for question answering.

DOCUMENT METADATA:
- Type: {document_type}
- Pages: {pages}
- Title: {title}
- Author: {author}
- Readability Score: {readability:.0f}/100

DOCUMENT STRUCTURE:
- Headings: {headings}
- Key Topics: {topics}
- Important Sections: {sections}

DOCUMENT CONTENT:
{document}

Return the complete reorganized text, keeping all original information."""

SUMMARY_PROMPT_TEMPLATE = """Summarize the following document so that later questions can be answered
from the summary alone. Keep names, figures, dates and page references.

{document}"""


def build_qa_prompt(question: str, document: str) -> str:
    return QA_PROMPT_TEMPLATE.format(document=document, question=question)


def build_restructure_prompt(
    document: str,
    metadata: DocumentMetadata,
    structure: DocumentStructure,
    analysis: ContentAnalysis,
) -> str:
    return RESTRUCTURE_PROMPT_TEMPLATE.format(
        document_type=analysis.document_type.value,
        pages=metadata.pages if metadata.pages is not None else "Unknown",
        title=metadata.title or "Not specified",
        author=metadata.author or "Not specified",
        readability=analysis.readability_score,
        headings=", ".join(structure.headings[:5]) or "None detected",
        topics=", ".join(analysis.key_topics[:5]) or "None detected",
        sections=" | ".join(analysis.important_sections[:3]) or "None detected",
        document=document,
    )


def build_summary_prompt(document: str) -> str:
    return SUMMARY_PROMPT_TEMPLATE.format(document=document)
