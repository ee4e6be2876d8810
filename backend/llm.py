# llm.py: talks to Gemini through google-generativeai directly (no LangChain wrapper)
import os
import logging

import google.generativeai as genai

from config import GOOGLE_API_KEY, GEMINI_MODEL

log = logging.getLogger(__name__)

PROMPT_PATH = os.path.join(os.path.dirname(__file__), "prompts", "quiz_prompt.md")
with open(PROMPT_PATH, "r", encoding="utf-8") as f:
    PROMPT_MD = f.read()

# difficulty -> (complexity, scope) wording for the prompt
DIFFICULTY_HINTS = {
    "easy": ("Basic concepts", "simple straightforward questions"),
    "medium": ("Moderate complexity", "a mix of conceptual and application questions"),
    "hard": ("Advanced topics", "challenging questions requiring full understanding"),
}

class LLMError(Exception):
    pass

_configured = False

def _ensure_configured() -> None:
    global _configured
    if _configured:
        return
    if not GOOGLE_API_KEY:
        raise LLMError("GOOGLE_API_KEY is missing in .env")
    genai.configure(api_key=GOOGLE_API_KEY)
    _configured = True

def format_chunk_prompt(chunk_text: str, num_questions: int, difficulty: str,
                        title: str, chunk_index: int) -> str:
    complexity, scope = DIFFICULTY_HINTS.get(difficulty, DIFFICULTY_HINTS["medium"])
    return PROMPT_MD.format(
        title=title,
        section=chunk_index + 1,
        chunk_text=chunk_text,
        num_questions=num_questions,
        complexity=complexity,
        scope=scope,
    )

async def generate_chunk_text(chunk_text: str, num_questions: int, difficulty: str,
                              title: str, chunk_index: int) -> str:
    """
    One model round trip for one transcript chunk.
    Returns the raw reply text. Raises LLMError on a blocked/empty reply;
    transport errors from the SDK propagate unchanged.
    """
    _ensure_configured()
    prompt_text = format_chunk_prompt(chunk_text, num_questions, difficulty, title, chunk_index)

    model = genai.GenerativeModel(GEMINI_MODEL)
    resp = await model.generate_content_async(prompt_text)
    # Handle blocked/empty responses
    try:
        text = resp.text
    except ValueError as e:
        raise LLMError(f"Model {GEMINI_MODEL} returned no usable text: {e}")
    if not text or not text.strip():
        raise LLMError(f"Model {GEMINI_MODEL} returned empty response.")
    return text.strip()

# --- Simple ping for /api/llm-test
def ping_llm() -> dict:
    """
    Returns {"ok": True, "model": <model_used>, "content": "..."} on success,
            or {"ok": False, "error": "..."} on failure.
    """
    try:
        _ensure_configured()
        resp = genai.GenerativeModel(GEMINI_MODEL).generate_content("Reply with OK")
        text = (resp.text or "").strip()
    except Exception as e:
        log.warning("[LLM] ping failed: %s", e)
        return {"ok": False, "error": str(e)}
    if not text:
        return {"ok": False, "error": "Empty response"}
    return {"ok": True, "model": GEMINI_MODEL, "content": text[:200]}
