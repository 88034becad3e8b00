# File untuk mendefinisikan model Pydantic untuk validasi dan struktur

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Tuple

# Urutan metrik ini adalah invariant sistem dan tidak bisa dikonfigurasi
CANONICAL_METRICS: Tuple[str, ...] = (
    "Security",
    "Performance",
    "Gas Efficiency",
    "Code Quality",
    "Documentation",
    "Other Key Areas",
)

PRIORITY_LEVELS: Tuple[str, ...] = ("Critical", "High", "Medium", "Low")

DEFAULT_EXPLANATION = "No explanation provided"
DEFAULT_SCORE = 0

# Model Input Request

class ContractInput(BaseModel):
    """
    Model input utama untuk request body
    FastAPI validasi otomatis
    """
    contract: str = Field(..., description="Source code smart contract yang akan diaudit.")

# Model data dari LLM (tidak dipercaya)

class RawMetric(BaseModel):
    """
    Satu entri metrik mentah dari argumen tool call.
    Semua field opsional dan tidak divalidasi karena berasal dari model.
    """
    model_config = ConfigDict(extra="ignore")

    metric: Any = Field(None, description="Nama metrik, bisa di luar daftar kanonik.")
    score: Any = Field(None, description="Skor dari model, rentang 0-10 tidak dicek.")
    explanation: Any = Field(None, description="Penjelasan singkat untuk skor.")

# Model Output Response

class NormalizedMetric(BaseModel):
    """
    Metrik yang sudah dinormalisasi, selalu punya nama kanonik, skor, dan penjelasan.
    """
    model_config = ConfigDict(frozen=True)

    metric: str = Field(..., description="Salah satu dari enam nama metrik kanonik.")
    score: Any = Field(..., description="Skor dari model (0 jika tidak ada). Rentang dan tipe tidak divalidasi.")
    explanation: Any = Field(..., description="Penjelasan skor, atau teks default jika kosong.")

class AuditResult(BaseModel):
    """
    Model output akhir dari satu analisis. Dibuat sekali per request dan tidak diubah lagi.
    Saat parsing, daftar saran dibaca dari 'suggestionForImprovement' (nama di tool schema)
    atau 'suggestions' (nama saat diserialisasi).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    audit_report: Any = Field(
        "",
        validation_alias=AliasChoices("auditReport", "audit_report"),
        serialization_alias="auditReport",
        description="Laporan audit dalam bentuk prosa.",
    )
    metric_scores: Tuple[NormalizedMetric, ...] = Field(
        ...,
        validation_alias=AliasChoices("metricScores", "metric_scores"),
        serialization_alias="metricScores",
        description="Tepat enam metrik dalam urutan kanonik.",
    )
    suggestions: Tuple[Any, ...] = Field(
        (),
        validation_alias=AliasChoices("suggestionForImprovement", "suggestions"),
        serialization_alias="suggestions",
        description="Daftar saran perbaikan, diteruskan apa adanya dari model.",
    )

    @field_validator("metric_scores")
    @classmethod
    def check_canonical_order(cls, value: Tuple[NormalizedMetric, ...]):
        names = tuple(m.metric for m in value)
        if names != CANONICAL_METRICS:
            raise ValueError(f"metricScores harus berisi {list(CANONICAL_METRICS)} sesuai urutan, bukan {list(names)}.")
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Serialisasi dengan key camelCase, sama seperti yang dikirim ke client HTTP."""
        return self.model_dump(mode="json", by_alias=True)

class AnalysisResponse(BaseModel):
    """
    Response sukses dari endpoint analisis
    """
    results: AuditResult = Field(..., description="Hasil audit yang sudah dinormalisasi.")

class ErrorResponse(BaseModel):
    """
    Response gagal dari endpoint analisis
    """
    error: str = Field(..., description="Pesan error untuk client.")

class SuggestionItem(BaseModel):
    """
    Bentuk saran yang didokumentasikan di tool schema. Hanya dipakai untuk menampilkan,
    item yang tidak sesuai tetap diteruskan tanpa diubah.
    """
    model_config = ConfigDict(extra="allow")

    category: Any = Field(None, description="Kategori saran, cth: 'Security', 'Performance'.")
    suggestion: Any = Field(None, description="Detail saran perbaikan.")
    priority: Any = Field(None, description=f"Prioritas, seharusnya salah satu dari {', '.join(PRIORITY_LEVELS)}.")

    def is_known_priority(self) -> bool:
        return self.priority in PRIORITY_LEVELS
