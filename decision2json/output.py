"""Output generation for JSON and HTML reports."""

import json
from pathlib import Path
from typing import Optional
from decision2json.formatting import estimate_page, format_extracted_value
from decision2json.models import CompareResult, DocumentExtraction, QADocument
from decision2json.normalizer import normalize_text

_STYLE = """
        body {
            font-family: Arial, sans-serif;
            margin: 20px;
            background-color: #f5f5f5;
            direction: rtl;
        }
        .container {
            max-width: 1200px;
            margin: 0 auto;
            background-color: white;
            padding: 30px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }
        h1 {
            color: #333;
            border-bottom: 3px solid #4CAF50;
            padding-bottom: 10px;
        }
        h2 {
            color: #555;
            margin-top: 30px;
            border-right: 4px solid #4CAF50;
            padding-right: 10px;
        }
        .section {
            margin: 20px 0;
            padding: 15px;
            background-color: #f9f9f9;
            border-radius: 5px;
        }
        .section-text {
            line-height: 1.6;
            white-space: pre-wrap;
            word-wrap: break-word;
            max-height: 300px;
            overflow-y: auto;
            background-color: white;
            padding: 10px;
        }
        .missing {
            color: #999;
        }
        .qa-section {
            margin: 30px 0;
            padding: 20px;
            border-radius: 5px;
        }
        .qa-passed {
            background-color: #d4edda;
            border: 2px solid #28a745;
        }
        .qa-failed {
            background-color: #f8d7da;
            border: 2px solid #dc3545;
        }
        .issue {
            color: #dc3545;
            margin: 5px 0;
        }
        .warning {
            color: #b8860b;
            margin: 5px 0;
        }
        table {
            width: 100%;
            border-collapse: collapse;
            margin: 15px 0;
        }
        th, td {
            border: 1px solid #ddd;
            padding: 8px;
            text-align: right;
        }
        th {
            background-color: #4CAF50;
            color: white;
        }
"""

_SECTION_LABELS = {
    "party_a": "טענות צד א'",
    "party_b": "טענות צד ב'",
    "ruling": "הכרעה",
    "comparisons": "עסקאות השוואה",
    "calculation": "תחשיב השבחה",
}


class OutputGenerator:
    """Generates JSON and HTML output files."""

    def __init__(self, output_dir: str):
        """Initialize output generator.

        Args:
            output_dir: Output directory path
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate_main_json(self, extraction: DocumentExtraction) -> Path:
        """Generate the extraction JSON file.

        Args:
            extraction: DocumentExtraction to serialize

        Returns:
            Path to generated JSON file
        """
        output_path = self.output_dir / f"{extraction.id}.json"
        self._write_json(output_path, extraction.model_dump(mode='json', exclude_none=False))
        return output_path

    def generate_qa_json(self, qa_document: QADocument) -> Path:
        """Generate QA JSON file.

        Args:
            qa_document: QADocument to serialize

        Returns:
            Path to generated JSON file
        """
        output_path = self.output_dir / f"{qa_document.document_id}.qa.json"
        self._write_json(output_path, qa_document.model_dump(mode='json', exclude_none=False))
        return output_path

    def generate_compare_json(self, result: CompareResult) -> Path:
        """Generate the comparison JSON file."""
        output_path = self.output_dir / "compare.json"
        self._write_json(output_path, result.model_dump(mode='json', exclude_none=False))
        return output_path

    def generate_html_report(
        self,
        extraction: DocumentExtraction,
        qa_document: Optional[QADocument] = None,
        source_text: Optional[str] = None,
    ) -> Path:
        """Generate the extraction HTML report.

        Args:
            extraction: DocumentExtraction to report on
            qa_document: Optional QADocument for QA information
            source_text: Optional document text, used for page estimates

        Returns:
            Path to generated HTML file
        """
        output_path = self.output_dir / f"{extraction.id}.report.html"
        html_content = self._generate_html_content(extraction, qa_document, source_text)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(html_content)
        return output_path

    def generate_compare_html(self, result: CompareResult) -> Path:
        """Generate the comparison table as HTML."""
        output_path = self.output_dir / "compare.html"

        html = self._html_head(f"השוואה: {result.term}")
        html += f"        <h1>{self._escape_html(result.term)}</h1>\n"
        if result.committee:
            html += f"        <p><strong>ועדה:</strong> {self._escape_html(result.committee)}</p>\n"
        html += f"        <p><strong>תוצאות:</strong> {result.total}</p>\n"

        html += "        <table>\n"
        html += "            <thead>\n"
        html += "                <tr><th>החלטה</th><th>ועדה</th><th>שנה</th><th>צד א'</th><th>צד ב'</th><th>הכרעה</th></tr>\n"
        html += "            </thead>\n"
        html += "            <tbody>\n"
        for row in result.rows:
            title = self._escape_html(row.title or row.id)
            if row.url:
                title = f'<a href="{self._escape_html(row.url)}">{title}</a>'
            html += "                <tr>\n"
            html += f"                    <td>{title}</td>\n"
            html += f"                    <td>{self._escape_html(row.committee or '')}</td>\n"
            html += f"                    <td>{self._escape_html(row.year or '')}</td>\n"
            for cell in (row.party_a_value, row.party_b_value, row.ruling_value):
                html += f"                    <td>{self._escape_html(cell or '-')}</td>\n"
            html += "                </tr>\n"
        html += "            </tbody>\n"
        html += "        </table>\n"
        html += self._html_tail()

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(html)
        return output_path

    def _generate_html_content(
        self,
        extraction: DocumentExtraction,
        qa_document: Optional[QADocument],
        source_text: Optional[str] = None,
    ) -> str:
        """Generate HTML content for the extraction report."""
        total_length = len(normalize_text(source_text)) if source_text else 0

        html = self._html_head(f"{extraction.id} - Report")
        html += f"        <h1>{self._escape_html(extraction.id)}</h1>\n"

        # Add QA section if available
        if qa_document:
            status_class = "qa-passed" if qa_document.passed else "qa-failed"
            html += f'        <div class="qa-section {status_class}">\n'
            html += "            <h2>Quality Assessment</h2>\n"
            html += f"            <p><strong>Score: {qa_document.score:.2%} {'✓ PASSED' if qa_document.passed else '✗ FAILED'}</strong></p>\n"
            html += f"            <p>Threshold: {qa_document.threshold:.2%}</p>\n"
            html += "            <ul>\n"
            for check in qa_document.checks.values():
                status = "✓" if check.passed else "✗"
                html += f"                <li>{status} {check.name}: {check.score:.2%}</li>\n"
            html += "            </ul>\n"

            if qa_document.issues:
                html += "            <h3>Issues</h3>\n            <ul>\n"
                for issue in qa_document.issues:
                    html += f"                <li class='issue'>{self._escape_html(issue)}</li>\n"
                html += "            </ul>\n"

            if qa_document.warnings:
                html += "            <h3>Warnings</h3>\n            <ul>\n"
                for warning in qa_document.warnings:
                    html += f"                <li class='warning'>{self._escape_html(warning)}</li>\n"
                html += "            </ul>\n"

            html += "        </div>\n"

        # Sections
        for name, section in extraction.sections().items():
            label = _SECTION_LABELS[name]
            html += '        <div class="section">\n'
            if section is None:
                html += f"            <h2>{label}</h2>\n"
                html += "            <p class='missing'>לא נמצא</p>\n"
                html += "        </div>\n"
                continue

            html += f"            <h2>{label}: {self._escape_html(section.title)}</h2>\n"
            html += f"            <p>Offset {section.char_index}"
            if total_length:
                html += f", page ~{estimate_page(section.char_index, total_length)}"
            html += f", {len(section.text)} chars, {len(section.values)} values</p>\n"
            html += f'            <div class="section-text">{self._escape_html(section.text)}</div>\n'
            html += "        </div>\n"

        # All values
        html += "        <h2>Values</h2>\n"
        if extraction.all_values:
            html += "        <table>\n"
            html += "            <thead>\n"
            html += "                <tr><th>Value</th><th>Unit</th><th>Page</th><th>Context</th></tr>\n"
            html += "            </thead>\n"
            html += "            <tbody>\n"
            for value in extraction.all_values:
                page = estimate_page(value.char_index, total_length) if total_length else "-"
                html += "                <tr>\n"
                html += f"                    <td>{self._escape_html(format_extracted_value(value))}</td>\n"
                html += f"                    <td>{self._escape_html(value.unit or '')}</td>\n"
                html += f"                    <td>{page}</td>\n"
                html += f"                    <td>{self._escape_html(value.context)}</td>\n"
                html += "                </tr>\n"
            html += "            </tbody>\n"
            html += "        </table>\n"
        else:
            html += "        <p class='missing'>No values found</p>\n"

        html += self._html_tail()
        return html

    def _html_head(self, title: str) -> str:
        return f"""<!DOCTYPE html>
<html lang="he" dir="rtl">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{self._escape_html(title)}</title>
    <style>{_STYLE}    </style>
</head>
<body>
    <div class="container">
"""

    def _html_tail(self) -> str:
        return """
    </div>
</body>
</html>
"""

    def _write_json(self, output_path: Path, data: dict) -> None:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def _escape_html(self, text: str) -> str:
        """Escape HTML special characters."""
        if not text:
            return ""
        return (text.replace("&", "&amp;")
                   .replace("<", "&lt;")
                   .replace(">", "&gt;")
                   .replace('"', "&quot;")
                   .replace("'", "&#x27;"))
