#!/usr/bin/env python3
"""
LLM analysis client.

This module contains the OpenRouterClient class that sends cleaned page
content to a chat completion model, either to extract the passages related
to a phrase or to analyze a keyword across several pages.
"""

import datetime
import json
import logging
import math
import os
import re

import requests

from ..core.errors import ServiceError

logger = logging.getLogger(__name__)

API_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "openai/gpt-4o"

# Estimated tokens after which no further texts are added to an analysis
MAX_CONTEXT_TOKENS = 50000

PROMPTS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "prompts")

_PLACEHOLDER = re.compile(r"\[\[(.*?)\]\]")
_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def load_prompt(name):
    """Read a prompt template shipped with the package."""
    with open(os.path.join(PROMPTS_DIR, name), "r", encoding="utf-8") as f:
        return f.read()


def estimate_tokens(text):
    """
    Rough token count: one token per four characters.

    Args:
        text: Text to measure

    Returns:
        int: 0 for empty text, at least 1 otherwise
    """
    length = len(text)
    if length == 0:
        return 0
    if length < 4:
        return 1
    return math.ceil(length / 4)


def replace_placeholders(template, variables):
    """
    Substitute [[name]] placeholders; unknown names are left untouched.
    """
    def substitute(match):
        name = match.group(1).strip()
        return str(variables[name]) if name in variables else match.group(0)

    return _PLACEHOLDER.sub(substitute, template)


def format_texts(texts, max_tokens=MAX_CONTEXT_TOKENS):
    """
    Format page texts as numbered blocks for the analysis prompt.

    Texts are appended in order; once the estimated size reaches max_tokens
    no further text is added.

    Args:
        texts: List of {"url": ..., "content": ...} dictionaries
        max_tokens: Token estimate at which formatting stops

    Returns:
        str: Formatted blocks ending with the TEXT END marker
    """
    formatted = ""
    for index, text in enumerate(texts, start=1):
        formatted += f"-----TEXT{index}-----\n"
        formatted += f"URL: {text['url']}\n"
        formatted += f"Content: {json.dumps(text['content'], ensure_ascii=False)}\n"
        if estimate_tokens(formatted) >= max_tokens:
            logger.info("Analysis context limit reached after %d of %d texts",
                        index, len(texts))
            break
    formatted += "-----TEXT END-----\n"
    return formatted


def parse_json_content(response):
    """
    Pull the JSON object out of a chat completion response.

    Args:
        response: Decoded API response

    Returns:
        dict: Parsed object, or an empty dict when the model did not return one
    """
    try:
        content = response["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return {}
    if not isinstance(content, str):
        return {}

    cleaned = _CODE_FENCE.sub("", content.strip())
    try:
        decoded = json.loads(cleaned)
    except ValueError:
        logger.warning("Model response is not valid JSON")
        return {}
    return decoded if isinstance(decoded, dict) else {}


class OpenRouterClient:
    """Client for the chat completion API."""

    def __init__(self, api_key, model=DEFAULT_MODEL, timeout=300, session=None,
                 keyword_prompt=None, phrase_prompt=None, today=None):
        """
        Initialize the client.

        Args:
            api_key: API key
            model: Model identifier
            timeout: Request timeout in seconds
            session: requests.Session, a fresh one when omitted
            keyword_prompt: System prompt for keyword analysis (packaged template by default)
            phrase_prompt: System prompt template for phrase extraction
            today: Callable returning the current date, injectable for tests
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()
        self.keyword_prompt = keyword_prompt or load_prompt("keyword_analysis.txt")
        self.phrase_prompt = phrase_prompt or load_prompt("phrase_extraction.txt")
        self.today = today or datetime.date.today

    def request(self, endpoint, data):
        """
        POST a JSON payload to an API endpoint.

        Args:
            endpoint: Path below the API base URL, e.g. "/chat/completions"
            data: Request payload

        Returns:
            dict: Decoded response

        Raises:
            ServiceError: If the API cannot be reached or answers with an error
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = self.session.post(API_BASE_URL + endpoint, json=data, headers=headers,
                                         timeout=self.timeout)
        except requests.RequestException as e:
            raise ServiceError(f"Error communicating with OpenRouter API: {e}") from e

        try:
            decoded = response.json()
        except ValueError:
            decoded = None

        if response.status_code >= 400:
            message = "Unknown error"
            if isinstance(decoded, dict) and isinstance(decoded.get("error"), dict):
                message = decoded["error"].get("message") or message
            raise ServiceError(f"OpenRouter API error: {message}",
                               status_code=response.status_code)

        if not isinstance(decoded, dict):
            raise ServiceError("OpenRouter API returned a non-JSON response",
                               status_code=response.status_code)
        return decoded

    def _complete(self, system_prompt, user_content, **options):
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
        }
        payload.update(options)
        logger.debug("Requesting completion from %s (%d characters)",
                     self.model, len(user_content))
        return parse_json_content(self.request("/chat/completions", payload))

    def analyze_keyword(self, keyword, texts, language="english"):
        """
        Analyze a keyword across several page texts.

        Args:
            keyword: Central keyword
            texts: List of {"url": ..., "content": ...} dictionaries
            language: Language the analysis is written in

        Returns:
            dict: The model's analysis, empty if it returned no JSON object
        """
        body = (
            "\n- **Central Keyword**:\n" + keyword
            + "\n- **Language**:\n" + language
            + "\n- **Web Content Context**:\n" + format_texts(texts)
        )
        return self._complete(self.keyword_prompt, body, max_tokens=16000)

    def extract_phrase_content(self, phrase, content, language="english"):
        """
        Extract the parts of a text that relate to a phrase.

        Args:
            phrase: Phrase to look for
            content: Cleaned page text
            language: Language of the content

        Returns:
            dict: Extracted content, empty if nothing was found
        """
        variables = {
            "phrase": phrase,
            "lang": language,
            "current_date": self.today().isoformat(),
        }
        prompt = replace_placeholders(self.phrase_prompt, variables)
        body = f"###Text to check \n{content}\n\n"
        return self._complete(prompt, body, max_tokens=16000, temperature=0.7)
