# app/services/llm/extraction.py
from typing import Any, Dict, Optional

from app.core.llm_config import OLLAMA_MODEL_EXTRACT, OLLAMA_MODEL_VISION
from app.services.ollama_client import ollama_chat_json
from app.services.llm.extraction_schema import PRESCRIPTION_SCHEMA
from app.services.llm.extraction_prompt import EXTRACT_SYSTEM_PROMPT
from app.services.llm.extraction_sanitize import sanitize_extraction

def llm_extract_prescription(ocr_text: Optional[str] = None, image_b64: Optional[str] = None) -> Dict[str, Any]:
    if image_b64:
        raw = ollama_chat_json(
            model=OLLAMA_MODEL_VISION,
            system=EXTRACT_SYSTEM_PROMPT,
            user="Extract the prescription shown in the image.",
            schema=PRESCRIPTION_SCHEMA,
            images=[image_b64],
        )
    else:
        raw = ollama_chat_json(
            model=OLLAMA_MODEL_EXTRACT,
            system=EXTRACT_SYSTEM_PROMPT,
            user=f"OCR_TEXT:\n{ocr_text or ''}\n\nExtract the prescription from OCR text.",
            schema=PRESCRIPTION_SCHEMA,
        )
    return sanitize_extraction(raw)
