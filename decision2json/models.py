"""Data models for decision text to JSON extraction."""

from enum import Enum
from typing import List, Optional, Dict
from pydantic import BaseModel, Field


class SectionType(str, Enum):
    """Structural role a region of decision text can play."""
    PARTY_A = "partyA"
    PARTY_B = "partyB"
    PARTIES_CLAIMS = "partiesClaims"
    RULING = "ruling"
    COMPARISONS = "comparisons"
    CALCULATION = "calculation"


class ExtractedValue(BaseModel):
    """A numeric fact found in the document text."""
    raw: str = Field(..., description="Exact numeral substring as matched")
    numeric: float = Field(..., gt=0)
    unit: Optional[str] = Field(default=None, description='One of ₪/מ"ר, ₪/דונם, ₪/יח\', ₪, %, מקדם or None')
    context: str = ""
    char_index: int = Field(..., ge=-1, description="Offset of raw in the normalized document, -1 if unknown")


class ExtractedSection(BaseModel):
    """A located section of the document (header match plus body)."""
    type: SectionType
    title: str = Field(..., description="Header phrase or fallback keyword that matched")
    text: str = Field(..., min_length=20, max_length=8000)
    char_index: int = Field(..., ge=0, description="Offset of the header match in the normalized document")
    text_offset: int = Field(..., ge=0, description="Offset of text[0] in the normalized document")
    values: List[ExtractedValue] = []


class DocumentExtraction(BaseModel):
    """Extraction result for a single document."""
    id: str
    party_a: Optional[ExtractedSection] = None
    party_b: Optional[ExtractedSection] = None
    ruling: Optional[ExtractedSection] = None
    comparisons: Optional[ExtractedSection] = None
    calculation: Optional[ExtractedSection] = None
    all_values: List[ExtractedValue] = []

    def sections(self) -> Dict[str, Optional[ExtractedSection]]:
        """Return the five section fields keyed by field name."""
        return {
            "party_a": self.party_a,
            "party_b": self.party_b,
            "ruling": self.ruling,
            "comparisons": self.comparisons,
            "calculation": self.calculation,
        }


# Comparison Models

class DocumentInput(BaseModel):
    """A document handed over by the retrieval layer for comparison."""
    id: str
    title: str = ""
    text: str = ""
    committee: Optional[str] = None
    year: Optional[str] = None
    url: Optional[str] = None


class CompareRow(BaseModel):
    """One row of the cross-document comparison table."""
    id: str
    title: str
    committee: Optional[str] = None
    year: Optional[str] = None
    url: Optional[str] = None
    party_a_value: Optional[str] = None
    party_b_value: Optional[str] = None
    ruling_value: Optional[str] = None
    ruling_numeric: Optional[float] = None


class CompareResult(BaseModel):
    """Comparison table for a search term across many documents."""
    term: str
    committee: Optional[str] = None
    total: int = 0
    rows: List[CompareRow] = []


# QA Models

class QACheck(BaseModel):
    """Individual QA check result."""
    name: str
    score: float = Field(..., ge=0.0, le=1.0, description="Score between 0.0 and 1.0")
    threshold: float = Field(default=0.80, ge=0.0, le=1.0)
    passed: bool


class QADocument(BaseModel):
    """QA assessment of one extraction."""
    document_id: str
    passed: bool
    score: float = Field(..., ge=0.0, le=1.0, description="Overall QA score")
    threshold: float = Field(default=0.80, ge=0.0, le=1.0)
    checks: Dict[str, QACheck] = Field(default_factory=dict)
    issues: List[str] = []
    warnings: List[str] = []
