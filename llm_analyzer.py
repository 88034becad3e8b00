import json
import requests
import asyncio
import logging
from typing import Any, Dict, Optional

from config import Settings
from errors import MissingApiKeyError, TransportError
from models import AuditResult, SuggestionItem
from normalizer import extract_tool_arguments, find_dropped_metrics, normalize
from prompts import PROVIDERS, build_request_payload

# Konfigurasi logging
logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: int = Settings.model_fields["LLM_TIMEOUT_SECONDS"].default

class LLMClient:
    """
    Client untuk endpoint chat completion yang kompatibel dengan OpenAI (OpenAI, Groq).
    Dibuat secara eksplisit dan diteruskan ke pemanggil, tidak ada client global.
    """

    def __init__(
            self,
            api_key: Optional[str],
            base_url: str,
            model: str,
            timeout: int = DEFAULT_TIMEOUT_SECONDS,
            force_tool_call: bool = True,
        ):
        if not api_key:
            raise MissingApiKeyError()
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.force_tool_call = force_tool_call

    @classmethod
    def from_provider(
            cls,
            provider: str,
            api_key: Optional[str],
            model: Optional[str] = None,
            base_url: Optional[str] = None,
            timeout: int = DEFAULT_TIMEOUT_SECONDS,
            force_tool_call: bool = True,
        ) -> "LLMClient":
        """
        Membuat client dari preset provider, model dan base URL bisa ditimpa.
        """
        if provider not in PROVIDERS:
            raise ValueError(f"Provider tidak dikenal: {provider}. Pilihan: {', '.join(PROVIDERS)}")
        preset = PROVIDERS[provider]
        return cls(
            api_key=api_key,
            base_url=base_url or preset["base_url"],
            model=model or preset["model"],
            timeout=timeout,
            force_tool_call=force_tool_call,
        )

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def create_chat_completion(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Mengirim satu request chat completion. Tidak ada retry.

        :param payload: Body request chat completion.
        :return: Respons JSON dari provider.
        :raises TransportError: Jika request gagal, status non-2xx, atau body bukan JSON.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(self.completions_url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            detail = _provider_error_message(e.response)
            logger.error(f"Provider LLM mengembalikan status {status}: {detail}")
            raise TransportError(f"LLM provider returned HTTP {status}: {detail}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Error saat request ke provider LLM: {e}")
            raise TransportError(f"Error contacting LLM provider: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Respons provider LLM bukan JSON: {response.text[:500]}")
            raise TransportError("LLM provider returned a non-JSON response") from e

def _provider_error_message(response: Optional[requests.Response]) -> str:
    if response is None:
        return "no response"
    try:
        body = response.json()
    except ValueError:
        return response.text[:500] or response.reason or ""
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return json.dumps(body)[:500]

def _log_diagnostics(raw: Dict[str, Any]) -> None:
    # Hanya dilaporkan di log, hasil normalisasi tidak berubah
    dropped = find_dropped_metrics(raw)
    if dropped:
        logger.warning(f"Metrik dari LLM dibuang saat normalisasi (duplikat atau tidak dikenal): {dropped}")

    suggestions = raw.get("suggestionForImprovement", raw.get("suggestions"))
    if isinstance(suggestions, list):
        unknown = [
            item.get("priority") for item in suggestions
            if isinstance(item, dict) and not SuggestionItem.model_validate(item).is_known_priority()
        ]
        if unknown:
            logger.warning(f"Prioritas saran di luar daftar yang didokumentasikan: {unknown}")

async def analyze_contract(contract: str, client: LLMClient) -> AuditResult:
    """
    Fungsi utama untuk modul ini. Menjalankan analisis LLM lalu menormalisasi hasilnya.
    Request yang blocking dijalankan di executor agar event loop tidak tertahan.
    """
    logger.info(f"Memulai analisis kontrak dengan model {client.model}...")
    payload = build_request_payload(contract, client.model, client.force_tool_call)

    loop = asyncio.get_running_loop()
    completion = await loop.run_in_executor(
        None,
        lambda: client.create_chat_completion(payload)
    )

    raw = extract_tool_arguments(completion)
    _log_diagnostics(raw)
    result = normalize(raw)
    logger.info("Analisis LLM berhasil dan output telah dinormalisasi.")
    return result
