import json
import time
import logging
import re
from typing import Optional, List, Dict, Sequence

import openai
from openai import AzureOpenAI, OpenAI
from pydantic import ValidationError

from menu_packager.config import Settings
from menu_packager.errors import AIProviderError, PackageGenerationError
from menu_packager.models.menu_models import AudienceType, MenuItem, PackageSelection
from menu_packager.parsers.menu_text_parser import split_menu_line
from menu_packager.parsers.prompt_templates import PACKAGE_SYSTEM_PROMPT, PACKAGE_USER_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)

COURSES = ("starters", "mains", "desserts")

RETRYABLE_ERRORS = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.InternalServerError,
)

CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def create_client(settings: Settings):
    api_key = settings.require_api_key()

    # retries are handled by LLMCaller so the backoff policy lives in one place
    if settings.uses_azure:
        client = AzureOpenAI(
            api_key=api_key,
            azure_endpoint=settings.azure_endpoint,
            api_version=settings.azure_api_version,
            max_retries=0,
        )
        logger.info(f"✓ AzureOpenAI client initialized (version={settings.azure_api_version})")
        return client

    client = OpenAI(api_key=api_key, base_url=settings.base_url, max_retries=0)
    logger.info(f"✓ OpenAI client initialized (model={settings.model})")
    return client


# ============================================================
# JSON REPAIR
# ============================================================

def _safe_json_load_with_repair(raw: str) -> Dict:
    if not raw:
        raise PackageGenerationError("Empty model output")

    text = raw.strip()

    # --- Strip markdown code fences ---
    m = CODE_BLOCK_RE.search(text)
    if m:
        text = m.group(1).strip()

    # --- Try direct parse ---
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # --- Trim leading/trailing chatter ---
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        text = text[start: end + 1]
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

    # --- Replace Python literals ---
    repaired = re.sub(r":\s*None\b", ": null", text)
    repaired = re.sub(r":\s*True\b", ": true", repaired)
    repaired = re.sub(r":\s*False\b", ": false", repaired)
    repaired = re.sub(r",\s*([}\]])", r"\1", repaired)

    try:
        return json.loads(repaired)
    except json.JSONDecodeError as e:
        logger.error("❌ Could not parse JSON from model output")
        logger.debug(raw[:1000])
        raise PackageGenerationError(
            f"Failed to parse AI response as valid JSON: {e}"
        ) from e


# ============================================================
# CHAT COMPLETIONS
# ============================================================

class LLMCaller:
    """Chat-completions access with the retry and error policy of the tool."""

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        self.client = client if client is not None else create_client(settings)
        self.model = settings.model_name
        self.max_retries = max(1, settings.max_retries)

    def complete(self, messages: List[Dict]) -> str:
        delay = 1
        for attempt in range(1, self.max_retries + 1):
            try:
                return self._call_llm(messages)
            except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
                raise AIProviderError(
                    "Invalid AI API key. Please update MENU_AI_API_KEY in your .env file.",
                    reason="auth",
                ) from e
            except RETRYABLE_ERRORS as e:
                logger.warning(f"Attempt {attempt} failed: {e}")
                if attempt == self.max_retries:
                    logger.error("❌ All retries failed.")
                    if isinstance(e, openai.RateLimitError):
                        raise AIProviderError(
                            "AI API rate limit exceeded. Please try again later.",
                            reason="rate_limit",
                        ) from e
                    raise AIProviderError(f"AI provider unavailable: {e}") from e
                time.sleep(delay)
                delay *= 2
            except openai.APIError as e:
                raise AIProviderError(f"AI request failed: {e}") from e

    def _call_llm(self, messages: List[Dict]) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            timeout=self.settings.timeout,
        )
        content = response.choices[0].message.content
        return content or ""


# ============================================================
# PACKAGE SELECTION
# ============================================================

def _coerce_item(entry) -> Optional[MenuItem]:
    if isinstance(entry, MenuItem):
        return entry
    if isinstance(entry, str):
        name, price = split_menu_line(entry)
        entry = {"name": name, "price": price}
    if not isinstance(entry, dict):
        return None

    name = entry.get("name") or entry.get("item_name")
    if not isinstance(name, str) or not name.strip():
        return None
    try:
        return MenuItem(name=name, price=entry.get("price"))
    except ValidationError:
        return None


def parse_package_response(raw: str, menu_items: Sequence[MenuItem] = ()) -> PackageSelection:
    """
    Validate the AI's package answer and turn it into a PackageSelection.

    Every course list must be present. Items found on the menu (matched by
    name, case-insensitively) take the menu's price string.
    """
    data = _safe_json_load_with_repair(raw)
    if isinstance(data, dict) and isinstance(data.get("package"), dict):
        data = data["package"]

    if not isinstance(data, dict):
        raise PackageGenerationError("AI response is not a JSON object")

    missing = [c for c in COURSES if not isinstance(data.get(c), list)]
    if missing:
        raise PackageGenerationError(
            f"AI response missing required fields: {', '.join(missing)}"
        )

    if "packagePrice" in data:
        logger.debug(f"Ignoring AI proposed package price {data['packagePrice']!r}")

    on_menu = {it.name.casefold(): it for it in menu_items}

    courses = {}
    for course in COURSES:
        items = []
        for entry in data[course]:
            item = _coerce_item(entry)
            if item is None:
                logger.warning(f"Skipping malformed {course} entry: {entry!r}")
                continue
            match = on_menu.get(item.name.casefold())
            if match is not None:
                item = match
            elif on_menu:
                logger.warning(f"AI picked {item.name!r}, which is not on the menu")
            items.append(item)
        courses[course] = tuple(items)

    return PackageSelection(**courses)


class PackageSelector(LLMCaller):

    def build_messages(self, menu_items: Sequence[MenuItem], audience: AudienceType) -> List[Dict]:
        profile = audience.profile
        menu_json = json.dumps([it.model_dump() for it in menu_items], ensure_ascii=False)

        prompt = PACKAGE_USER_PROMPT_TEMPLATE.format(
            menu_json=menu_json,
            audience=audience.value,
            starter_count=profile.starter_count,
            main_count=profile.main_count,
            dessert_count=profile.dessert_count,
            preferences=profile.preferences,
            avoid=profile.avoid,
        )
        return [
            {"role": "system", "content": PACKAGE_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    def select(self, menu_items: Sequence[MenuItem], audience: AudienceType) -> PackageSelection:
        logger.info(f"Sending package generation request for audience type: {audience.value}")

        raw = self.complete(self.build_messages(menu_items, audience))
        selection = parse_package_response(raw, menu_items)

        profile = audience.profile
        expected = {
            "starters": profile.starter_count,
            "mains": profile.main_count,
            "desserts": profile.dessert_count,
        }
        for course, count in expected.items():
            got = len(getattr(selection, course))
            if got != count:
                logger.warning(f"AI selected {got} {course}, expected {count} for {audience.value}")

        return selection
