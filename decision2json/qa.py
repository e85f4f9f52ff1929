"""QA validation module for extraction results."""

from typing import Dict, List, Set, Tuple
from decision2json.models import DocumentExtraction, QADocument, QACheck, SectionType
from decision2json.normalizer import normalize_text
from decision2json.numerals import parse_number
from decision2json.patterns import SECTION_PATTERNS


class ExtractionQA:
    """Scores an extraction against quality thresholds."""

    def __init__(self, threshold: float = 0.80):
        """Initialize QA validator.

        Args:
            threshold: Minimum score required to pass (default 0.80)
        """
        self.threshold = threshold

    def validate(self, extraction: DocumentExtraction, source_text: str) -> QADocument:
        """Run QA validation on an extraction.

        Args:
            extraction: The DocumentExtraction to check
            source_text: Document text the extraction was produced from

        Returns:
            QADocument with validation results
        """
        checks: Dict[str, QACheck] = {}
        issues: List[str] = []
        warnings: List[str] = []

        # Check 0: Value integrity - hard fail, values must be reproducible
        integrity_score, integrity_issues = self._check_value_integrity(extraction, source_text)
        checks["value_integrity"] = QACheck(
            name="Value Integrity",
            score=integrity_score,
            threshold=self.threshold,
            passed=integrity_score >= 1.0
        )
        issues.extend(integrity_issues)

        # Check 1: Section coverage
        coverage_score = self._check_section_coverage(extraction)
        checks["section_coverage"] = QACheck(
            name="Section Coverage",
            score=coverage_score,
            threshold=self.threshold,
            passed=coverage_score >= self.threshold
        )
        if coverage_score < self.threshold:
            issues.append(f"Section coverage below threshold: {coverage_score:.2f} < {self.threshold:.2f}")

        # Check 2: Ruling located
        ruling_score = 1.0 if extraction.ruling is not None else 0.0
        checks["ruling_presence"] = QACheck(
            name="Ruling Presence",
            score=ruling_score,
            threshold=self.threshold,
            passed=ruling_score >= self.threshold
        )
        if ruling_score < 1.0:
            issues.append("Ruling section not found")

        # Check 3: Located sections carry values
        value_score, value_issues = self._check_value_coverage(extraction)
        checks["value_coverage"] = QACheck(
            name="Value Coverage",
            score=value_score,
            threshold=self.threshold,
            passed=value_score >= self.threshold
        )
        issues.extend(value_issues)

        warnings.extend(self._collect_fallback_warnings(extraction))

        weights = {
            "value_integrity": 0.25,
            "section_coverage": 0.30,
            "ruling_presence": 0.20,
            "value_coverage": 0.25
        }

        overall_score = sum(
            checks[key].score * weights.get(key, 0.0)
            for key in checks
        )
        overall_score = max(0.0, min(1.0, overall_score))

        if not checks["value_integrity"].passed:
            passed = False
        else:
            passed = all(check.passed for check in checks.values()) and overall_score >= self.threshold

        return QADocument(
            document_id=extraction.id,
            passed=passed,
            score=overall_score,
            threshold=self.threshold,
            checks=checks,
            issues=issues,
            warnings=warnings
        )

    def _check_section_coverage(self, extraction: DocumentExtraction) -> float:
        """Fraction of the five section fields that were located."""
        sections = extraction.sections()
        found = sum(1 for section in sections.values() if section is not None)
        return found / len(sections)

    def _check_value_coverage(self, extraction: DocumentExtraction) -> Tuple[float, List[str]]:
        """Fraction of located sections holding at least one value.

        Returns:
            Tuple of (score, issues)
        """
        issues: List[str] = []
        found = [(name, section) for name, section in extraction.sections().items() if section is not None]
        if not found:
            return 0.0, ["No sections located"]

        with_values = 0
        for name, section in found:
            if section.values:
                with_values += 1
            else:
                issues.append(f"Section {name} ('{section.title}') has no values")

        return with_values / len(found), issues

    def _check_value_integrity(self, extraction: DocumentExtraction, source_text: str) -> Tuple[float, List[str]]:
        """Check that every value parses back, is positive, relocates and is unique.

        Returns:
            Tuple of (score, issues) - score is the fraction of sound values
        """
        issues: List[str] = []
        if not extraction.all_values:
            return 1.0, issues

        normalized = normalize_text(source_text) if source_text else ""
        seen: Set[Tuple[float, int]] = set()
        sound = 0

        for value in extraction.all_values:
            problems: List[str] = []

            if value.numeric <= 0:
                problems.append("non-positive")
            if parse_number(value.raw) != value.numeric:
                problems.append(f"raw '{value.raw}' does not parse to {value.numeric}")
            if value.char_index >= 0 and normalized[value.char_index:value.char_index + len(value.raw)] != value.raw:
                problems.append(f"raw '{value.raw}' not found at offset {value.char_index}")

            key = (value.numeric, value.char_index)
            if key in seen:
                problems.append(f"duplicate at offset {value.char_index}")
            seen.add(key)

            if problems:
                if len(issues) < 10:
                    issues.append(f"Value {value.raw}: " + ", ".join(problems))
            else:
                sound += 1

        return sound / len(extraction.all_values), issues

    def _collect_fallback_warnings(self, extraction: DocumentExtraction) -> List[str]:
        """Warn about sections located without a formal header."""
        warnings: List[str] = []

        for name, section in extraction.sections().items():
            if section is None:
                continue
            if section.type == SectionType.PARTIES_CLAIMS:
                warnings.append(f"Section {name} taken from combined parties' claims ('{section.title}')")
            elif section.title not in SECTION_PATTERNS.get(section.type, []):
                warnings.append(f"Section {name} located by keyword fallback ('{section.title}')")

        unlocated = sum(1 for value in extraction.all_values if value.char_index < 0)
        if unlocated:
            warnings.append(f"{unlocated} value(s) near the search term could not be relocated")

        return warnings
