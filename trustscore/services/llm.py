import json
from typing import Dict, Any, List, Optional, Protocol
import httpx

from trustscore.config import logger, settings, LLM_CONFIG
from trustscore.exceptions import LLMException
from trustscore.utils.circuit_breaker import CircuitBreaker
from trustscore.utils.retry import retry_call

Message = Dict[str, str]


class LanguageModel(Protocol):
    """Single-shot text generation from chat messages."""

    async def generate(
        self,
        messages: List[Message],
        context: Optional[Dict[str, Any]] = None,
        system_prompt: Optional[str] = None,
    ) -> Dict[str, Any]:
        ...


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, LLMException) and error.recoverable


def _extract_text(data: Any) -> str:
    text = ""
    try:
        if isinstance(data, dict):
            candidates = data.get("candidates", [])
            if isinstance(candidates, list) and candidates:
                content = candidates[0].get("content", {})
                parts = content.get("parts", [])
                if isinstance(parts, list) and parts:
                    text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
            if not text:
                text = data.get("output", "") or data.get("text", "")
    except (AttributeError, IndexError, TypeError) as e:
        logger.error("Error parsing Gemini response structure: %s. Response: %s", e, data)
        text = json.dumps(data)
    return text or json.dumps(data)


class GeminiClient:
    """``LanguageModel`` backed by the Gemini ``generateContent`` REST endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: float = LLM_CONFIG.REQUEST_TIMEOUT,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.endpoint = endpoint or settings.GEMINI_ENDPOINT
        self.timeout = timeout
        self.breaker = breaker or CircuitBreaker(
            name="gemini_llm",
            failure_threshold=5,
            recovery_timeout=60.0,
            expected_exception=LLMException,
        )

    def _build_body(self, messages: List[Message], system_prompt: Optional[str]) -> Dict[str, Any]:
        contents = []
        system_parts = [system_prompt] if system_prompt else []

        for message in messages:
            role = message.get("role", "user")
            text = message.get("content", "")
            if role == "system":
                if text and text not in system_parts:
                    system_parts.append(text)
                continue
            contents.append({
                "role": "model" if role == "assistant" else "user",
                "parts": [{"text": text}],
            })

        body: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": LLM_CONFIG.TEMPERATURE,
                "maxOutputTokens": LLM_CONFIG.MAX_OUTPUT_TOKENS,
            },
        }
        if system_parts:
            body["systemInstruction"] = {"parts": [{"text": "\n\n".join(system_parts)}]}
        return body

    async def _post(self, body: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint, headers=headers, json=body)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Gemini HTTP error %s for URL %s: %s", e.response.status_code, e.request.url, e.response.text)
            status = e.response.status_code
            raise LLMException(f"HTTP {status}", recoverable=status == 429 or status >= 500)
        except httpx.RequestError as e:
            logger.error("Gemini request error: %s", str(e))
            raise LLMException(f"Request failed: {str(e)}", recoverable=True)
        except ValueError as e:
            logger.error("Gemini returned a non-JSON body: %s", e)
            raise LLMException("Invalid JSON in provider response", recoverable=True)

    async def generate(
        self,
        messages: List[Message],
        context: Optional[Dict[str, Any]] = None,
        system_prompt: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not self.api_key:
            logger.critical("GEMINI_API_KEY not configured.")
            raise LLMException("API key not configured", recoverable=False)

        body = self._build_body(messages, system_prompt)
        data = await self.breaker.call(
            retry_call,
            self._post,
            body,
            max_attempts=LLM_CONFIG.TRANSPORT_ATTEMPTS,
            exceptions=(LLMException,),
            retry_if=_is_transient,
        )
        return {"content": _extract_text(data), "raw": data}
