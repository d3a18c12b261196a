import logging
import os

from openai import OpenAI

from app.config import SUMMARY_MODEL

logger = logging.getLogger(__name__)


class SummaryConfigError(RuntimeError):
    pass


class SummaryGenerationError(RuntimeError):
    pass


def build_summary_prompt(content: str) -> str:
    return (
        "Please provide a concise summary of the following article in 3-4 sentences. "
        f"Focus on the key points and main takeaways:\n\n{content}"
    )


def summarize_article(content: str) -> str:
    """
    Ask the LLM for a 3-4 sentence summary of ``content``.
    Raises SummaryConfigError when no API key is set and
    SummaryGenerationError when the upstream call fails or returns no text.
    """
    api_key = os.getenv("OPEN_API_KEY")
    if not api_key:
        logger.error("OPEN_API_KEY is not set")
        raise SummaryConfigError("API key not configured")

    client = OpenAI(api_key=api_key)

    logger.info("Summarizing article (%d chars) with %s", len(content), SUMMARY_MODEL)
    try:
        response = client.chat.completions.create(
            model=SUMMARY_MODEL,
            messages=[
                {"role": "system", "content": "You summarize blog articles for readers."},
                {"role": "user", "content": build_summary_prompt(content)}
            ],
            temperature=0.3,
            max_tokens=200,
        )
    except Exception as e:
        logger.error("LLM API error: %s", e)
        raise SummaryGenerationError("Failed to generate summary") from e

    summary = None
    if response.choices:
        summary = (response.choices[0].message.content or "").strip()

    if not summary:
        logger.error("No summary generated")
        raise SummaryGenerationError("Failed to generate summary")

    return summary
