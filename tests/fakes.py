import json

import requests


class FakeResponse:
    def __init__(self, payload, status_code=200, text=None):
        self._payload = payload
        self.status_code = status_code
        self.reason = "Error" if status_code >= 400 else "OK"
        self.text = text if text is not None else json.dumps(payload)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def tool_call_completion(arguments):
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return {
        "id": "chatcmpl-1",
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "tool_calls": [
                        {
                            "id": "call_1",
                            "type": "function",
                            "function": {"name": "generate_audit_report", "arguments": arguments},
                        }
                    ],
                },
            }
        ],
    }


SAMPLE_ARGUMENTS = {
    "auditReport": "The contract is a simple voting system with admin-only proposal creation.",
    "metricScores": [
        {"metric": "Performance", "score": 9, "explanation": "Efficient state usage."},
        {"metric": "Security", "score": 8, "explanation": "No reentrancy guard."},
        {"metric": "Documentation", "score": 7},
        {"metric": "Code Quality", "score": 9, "explanation": "Readable."},
    ],
    "suggestionForImprovement": [
        {"category": "Security", "suggestion": "Add reentrancy guards.", "priority": "Critical"},
        {"category": "Documentation", "suggestion": "Expand NatSpec comments.", "priority": "Low"},
    ],
}
