import json
import logging
from typing import Any, Dict, List, Optional

import requests

from app.core.llm_config import (
    OLLAMA_BASE_URL,
    OLLAMA_TEMPERATURE,
    OLLAMA_TIMEOUT_S,
)

logger = logging.getLogger(__name__)

class OllamaError(RuntimeError):
    pass

def _safe_json_parse(text: str) -> Dict[str, Any]:
    """Parse JSON even if model returns extra text or ```json fences."""
    text = (text or "").strip()
    text = text.replace("```json", "").replace("```", "").strip()
    try:
        return json.loads(text)
    except ValueError:
        pass

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except ValueError:
            pass

    raise OllamaError(f"Invalid JSON from LLM: {text[:200]}...")

def ollama_chat_json(
    model: str,
    system: str,
    user: str,
    schema: Optional[Dict[str, Any]] = None,
    images: Optional[List[str]] = None,
    temperature: Optional[float] = None,
    timeout_s: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Calls Ollama /api/chat and returns JSON from assistant message content.
    `images` are base64 strings attached to the user message (vision models).
    """
    url = f"{OLLAMA_BASE_URL}/chat"
    user_msg: Dict[str, Any] = {"role": "user", "content": user}
    if images:
        user_msg["images"] = images

    payload: Dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": system},
            user_msg,
        ],
        "stream": False,
        "options": {"temperature": temperature if temperature is not None else OLLAMA_TEMPERATURE},
    }
    if schema is not None:
        payload["format"] = schema

    try:
        r = requests.post(url, json=payload, timeout=timeout_s or OLLAMA_TIMEOUT_S)
    except requests.RequestException as e:
        logger.warning("Ollama request to %s failed: %s", url, e)
        raise OllamaError(f"Ollama unreachable: {e}") from e

    if r.status_code >= 400:
        raise OllamaError(f"Ollama {r.status_code}: {r.text}")

    data = r.json()
    content = (data.get("message") or {}).get("content", "")
    return _safe_json_parse(content)
