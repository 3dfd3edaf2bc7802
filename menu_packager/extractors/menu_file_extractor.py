import base64
import logging
from pathlib import Path
from typing import Optional, List, Dict

from menu_packager.config import Settings
from menu_packager.errors import UnsupportedFileTypeError
from menu_packager.parsers.llm_parser import LLMCaller
from menu_packager.parsers.prompt_templates import MENU_EXTRACTION_PROMPT
from menu_packager.utils.clean_text import normalize_extracted_text

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".heic": "image/heic",
}

TEXT_SUFFIXES = {".txt"}


def get_mime_type(file_name: str) -> Optional[str]:
    return MIME_TYPES.get(Path(file_name).suffix.lower())


class MenuFileExtractor:
    """
    Turns an uploaded menu into "name - price" lines.

    PDFs and images go to the AI provider as base64 payloads. Text files are
    treated as manual entry and read as-is. The AI client is only created
    when a file actually needs it.
    """

    def __init__(self, settings: Settings, caller: Optional[LLMCaller] = None):
        self.settings = settings
        self._caller = caller

    @property
    def caller(self) -> LLMCaller:
        if self._caller is None:
            self._caller = LLMCaller(self.settings)
        return self._caller

    def get_supported_formats(self) -> list:
        return sorted(set(MIME_TYPES) | TEXT_SUFFIXES)

    def extract(self, file_path: str) -> str:
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        self._check_supported(file_path.name)

        if file_path.suffix.lower() in TEXT_SUFFIXES:
            logger.info(f"Reading menu text from {file_path.name}")
            return file_path.read_text(encoding="utf-8")

        return self.extract_bytes(file_path.read_bytes(), file_path.name)

    def extract_bytes(self, data: bytes, file_name: str) -> str:
        self._check_supported(file_name)

        if Path(file_name).suffix.lower() in TEXT_SUFFIXES:
            return data.decode("utf-8")

        mime_type = get_mime_type(file_name)
        logger.info(f"Sending {file_name} ({mime_type}, {len(data)} bytes) to the AI provider")

        raw = self.caller.complete(self._build_messages(data, file_name, mime_type))
        text = normalize_extracted_text(raw)

        logger.info(f"✓ Extracted {len(text.splitlines())} menu lines")
        return text

    # --------------------------------------------------
    # HELPERS
    # --------------------------------------------------

    def _check_supported(self, file_name: str):
        extension = Path(file_name).suffix.lower()
        if extension not in MIME_TYPES and extension not in TEXT_SUFFIXES:
            supported = ", ".join(s.lstrip(".") for s in self.get_supported_formats())
            raise UnsupportedFileTypeError(
                f"Unsupported file type: {extension.lstrip('.') or file_name}. Supported types: {supported}"
            )

    def _build_messages(self, data: bytes, file_name: str, mime_type: str) -> List[Dict]:
        data_url = f"data:{mime_type};base64," + base64.b64encode(data).decode()

        if mime_type == "application/pdf":
            part = {
                "type": "file",
                "file": {"filename": Path(file_name).name, "file_data": data_url},
            }
        else:
            part = {"type": "image_url", "image_url": {"url": data_url}}

        return [{
            "role": "user",
            "content": [{"type": "text", "text": MENU_EXTRACTION_PROMPT}, part],
        }]
