"""
Normalisasi output tool call LLM menjadi AuditResult yang lengkap dan berurutan.
Semua fungsi di sini murni, tanpa I/O.
"""

import copy
import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, List

from errors import MalformedResponseError, ResponseParseError
from models import (
    CANONICAL_METRICS,
    DEFAULT_EXPLANATION,
    DEFAULT_SCORE,
    AuditResult,
    NormalizedMetric,
    RawMetric,
)

logger = logging.getLogger(__name__)

def _first(items: Any) -> Any:
    if isinstance(items, list) and items:
        return items[0]
    return None

def _reject_constant(token: str) -> Any:
    # NaN dan Infinity bukan JSON yang valid
    raise ResponseParseError(f"Tool call arguments contain a non-JSON constant: {token}")

def extract_tool_arguments(completion: Mapping) -> Dict[str, Any]:
    """
    Mengambil argumen tool call dari respons chat completion.

    Mendukung format 'tool_calls' dan format lama 'function_call'.

    :param completion: Respons chat completion yang sudah di-decode dari JSON.
    :return: Argumen tool call sebagai dict.
    :raises MalformedResponseError: Jika tidak ada tool/function call.
    :raises ResponseParseError: Jika argumen bukan objek JSON yang valid.
    """
    choice = _first(completion.get("choices")) if isinstance(completion, Mapping) else None
    message = choice.get("message") if isinstance(choice, Mapping) else None
    if not isinstance(message, Mapping):
        raise MalformedResponseError("Response does not contain a message")

    call = None
    tool_call = _first(message.get("tool_calls"))
    if isinstance(tool_call, Mapping) and isinstance(tool_call.get("function"), Mapping):
        call = tool_call["function"]
    elif isinstance(message.get("function_call"), Mapping):
        call = message["function_call"]

    if call is None:
        raise MalformedResponseError("Expected function call in response but received none")

    arguments = call.get("arguments")
    if isinstance(arguments, Mapping):
        return dict(arguments)
    if not isinstance(arguments, str):
        raise ResponseParseError("Tool call arguments are missing")

    try:
        parsed = json.loads(arguments, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Tool call arguments are not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ResponseParseError(f"Tool call arguments must be a JSON object, got {type(parsed).__name__}")
    return parsed

def _raw_metrics(raw: Mapping) -> List[RawMetric]:
    entries = raw.get("metricScores")
    if not isinstance(entries, list):
        logger.debug(f"metricScores bukan list ({type(entries).__name__}), dianggap kosong.")
        return []
    return [RawMetric.model_validate(entry) for entry in entries if isinstance(entry, Mapping)]

def _build_metric_map(raw: Mapping) -> Dict[str, RawMetric]:
    # entri terakhir dengan nama yang sama menimpa entri sebelumnya
    metric_map: Dict[str, RawMetric] = {}
    for entry in _raw_metrics(raw):
        if isinstance(entry.metric, str):
            metric_map[entry.metric] = entry
    return metric_map

def normalize(raw: Mapping) -> AuditResult:
    """
    Mengubah payload mentah dari LLM menjadi AuditResult dengan tepat enam metrik kanonik.

    Metrik yang tidak ada diisi skor 0 dan penjelasan default. Skor 0 yang asli dan
    metrik yang hilang sama-sama menghasilkan 0. auditReport dan saran diteruskan tanpa validasi.
    """
    if not isinstance(raw, Mapping):
        raise ResponseParseError(f"Audit payload must be an object, got {type(raw).__name__}")

    metric_map = _build_metric_map(raw)
    metric_scores = []
    for name in CANONICAL_METRICS:
        found = metric_map.get(name)
        metric_scores.append(
            NormalizedMetric(
                metric=name,
                score=(found.score if found else None) or DEFAULT_SCORE,
                explanation=(found.explanation if found else None) or DEFAULT_EXPLANATION,
            )
        )

    suggestions = raw.get("suggestionForImprovement", raw.get("suggestions"))
    return AuditResult(
        audit_report=raw.get("auditReport", ""),
        metric_scores=tuple(metric_scores),
        suggestions=tuple(copy.deepcopy(suggestions)) if isinstance(suggestions, list) else (),
    )

def normalize_completion(completion: Mapping) -> AuditResult:
    """
    Ekstrak argumen tool call lalu normalisasi. Tidak ada hasil parsial jika gagal.
    """
    return normalize(extract_tool_arguments(completion))

def find_dropped_metrics(raw: Mapping) -> List[str]:
    """
    Nama metrik yang dibuang saat normalisasi: nama di luar daftar kanonik
    dan duplikat yang tertimpa entri setelahnya.
    """
    dropped: List[str] = []
    seen = set()
    for entry in reversed(_raw_metrics(raw)):
        name = entry.metric
        if not isinstance(name, str) or name not in CANONICAL_METRICS or name in seen:
            dropped.append(str(name))
        else:
            seen.add(name)
    dropped.reverse()
    return dropped
