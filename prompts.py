# File khusus untuk prompt dan tool schema LLM agar file LLM lebih rapih

from typing import Any, Dict

from models import CANONICAL_METRICS, PRIORITY_LEVELS

AUDIT_PROMPT_TEMPLATE = "Analyze this smart contract: {contract}"

AUDIT_TOOL_NAME = "generate_audit_report"

# Provider OpenAI-compatible: base URL dan model default
PROVIDERS: Dict[str, Dict[str, str]] = {
    "openai": {
        "base_url": "https://api.openai.com/v1",
        "model": "gpt-4o-mini",
    },
    "groq": {
        "base_url": "https://api.groq.com/openai/v1",
        "model": "deepseek-r1-distill-llama-70b",
    },
}

AUDIT_REPORT_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": AUDIT_TOOL_NAME,
        "description": "Generate a detailed audit report for a smart contract",
        "parameters": {
            "type": "object",
            "properties": {
                "auditReport": {
                    "type": "string",
                    "description": "A detailed audit report of the smart contract",
                },
                "metricScores": {
                    "type": "array",
                    "description": "An array containing exactly 6 specific metrics with scores from 0-10",
                    "items": {
                        "type": "object",
                        "properties": {
                            "metric": {
                                "type": "string",
                                "enum": list(CANONICAL_METRICS),
                            },
                            "score": {
                                "type": "integer",
                                "minimum": 0,
                                "maximum": 10,
                                "description": "Score from 0-10, where 10 is the best",
                            },
                            "explanation": {
                                "type": "string",
                                "description": "Brief Explanation for the score provided",
                            },
                        },
                        "required": ["metric", "score"],
                    },
                    "minItems": len(CANONICAL_METRICS),
                    "maxItems": len(CANONICAL_METRICS),
                },
                "suggestionForImprovement": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "category": {
                                "type": "string",
                                "description": "Category of the suggestion(e.g. Security, Performance, Code Quality)",
                            },
                            "suggestion": {
                                "type": "string",
                                "description": "Detailed suggestion for improvement",
                            },
                            "priority": {
                                "type": "string",
                                "enum": list(PRIORITY_LEVELS),
                                "description": "Priority of the suggestion",
                            },
                        },
                        "required": ["category", "suggestion", "priority"],
                    },
                    "description": "A list of suggestions for improving the smart contract in terms of security, performance, and any other identified weakness",
                },
            },
            "required": ["auditReport", "metricScores", "suggestionForImprovement"],
        },
    },
}

def build_prompt(contract: str) -> str:
    """
    Membuat prompt user, source code kontrak disisipkan apa adanya.
    """
    return AUDIT_PROMPT_TEMPLATE.format(contract=contract)

def build_request_payload(contract: str, model: str, force_tool_call: bool = True) -> Dict[str, Any]:
    """
    Membuat payload chat completion: satu pesan user dan satu tool audit.
    Jika force_tool_call aktif, model diwajibkan memanggil tool tersebut.
    """
    payload: Dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": build_prompt(contract)}],
        "tools": [AUDIT_REPORT_TOOL],
        "stream": False,
    }
    if force_tool_call:
        payload["tool_choice"] = {"type": "function", "function": {"name": AUDIT_TOOL_NAME}}
    return payload
