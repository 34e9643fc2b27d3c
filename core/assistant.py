from __future__ import annotations

import logging
from typing import Optional

import requests

from .models import Channel

# Petit "assistant" : demande à Gemini (API REST generateContent) un court texte sur la chaîne
# en cours. Toute erreur est absorbée et remplacée par un message fixe.

log = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
UNAVAILABLE_MESSAGE = "The assistant is currently unavailable."


def build_prompt(channel: Channel) -> str:
    return (
        f'Give a short, friendly description (2-3 sentences) of the TV channel "{channel.name}" '
        f'(category: {channel.group}). Mention what kind of programmes viewers can expect.'
    )


def _reply_text(payload: dict) -> str:
    parts = payload["candidates"][0]["content"]["parts"]
    return "".join(str(p.get("text", "")) for p in parts).strip()


class ChannelAssistant:
    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.api_key = (api_key or "").strip()
        self.model = model or DEFAULT_MODEL
        self.session = session or requests
        self.timeout = float(timeout)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def describe(self, channel: Channel) -> str:
        """Retourne le texte du modèle, ou UNAVAILABLE_MESSAGE en cas de problème (jamais d'exception)."""
        if not self.enabled:
            log.info("Assistant: pas de clé API configurée.")
            return UNAVAILABLE_MESSAGE

        url = f"{GEMINI_API_BASE}/models/{self.model}:generateContent"
        body = {"contents": [{"parts": [{"text": build_prompt(channel)}]}]}
        try:
            r = self.session.post(
                url,
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
            r.raise_for_status()
            text = _reply_text(r.json())
        except Exception as e:
            log.warning("Assistant indisponible (%s): %s", type(e).__name__, e)
            return UNAVAILABLE_MESSAGE

        return text or UNAVAILABLE_MESSAGE
