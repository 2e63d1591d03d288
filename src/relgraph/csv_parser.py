"""
CSV Parser for relation surveys (Layer 1: Raw Input → Columns + Rows).

Reads a survey export into typed columns and rows.

CSV Format:
    <timestamp>, <respondent name>, <relation question for person A>, <... person B>, ...

    - Row 1 is the header
    - Column 0 is metadata (unused), column 1 is the respondent's name
    - Every following column is a target person; its header is usually the
      survey question, e.g. "Votre relation vis-à-vis de : Alice"
    - Cells hold free-text relation labels; empty cell = no answer

Syntax Notes:
    - Blank lines are skipped
    - Short rows read as empty cells, extra cells are ignored
"""

import csv
import re
from io import StringIO
from typing import List, Optional, Sequence, Tuple, Union

from relgraph.model import Column, SurveyRow


class CSVParseError(Exception):
    """Raised when the input cannot be read as CSV."""
    pass


# Question phrasing with optional colon; surrounding text is kept
_RELATION_QUESTION_RE = re.compile(r"votre relation vis-à-vis de\s*:?", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def clean_header_name(header: Optional[str]) -> str:
    """
    Extract a person name from one header field.

    Relation-question headers lose the question text, line breaks, quotes
    and repeated whitespace. Other headers only lose quotes and surrounding
    whitespace.

    Examples:
        'Votre relation vis-à-vis de : "Alice\\nMartin"' -> 'Alice Martin'
        ' "Nom" '                                         -> 'Nom'
    """
    if header is None:
        return ""
    if _RELATION_QUESTION_RE.search(header):
        name = _RELATION_QUESTION_RE.sub("", header, count=1)
        name = name.replace("\n", " ").replace("\r", " ").replace('"', "")
        return _WHITESPACE_RE.sub(" ", name).strip()
    return header.replace('"', "").strip()


def clean_header(fields: Sequence[Optional[str]]) -> List[Column]:
    """Pair every raw header field with its cleaned person name, order preserved."""
    return [Column(raw=f or "", cleaned=clean_header_name(f)) for f in fields]


def _decode(content: Union[str, bytes]) -> str:
    if isinstance(content, bytes):
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CSVParseError(f"CSV is not valid UTF-8: {e}")
    if content.startswith("\ufeff"):
        return content[1:]
    return content


def parse_survey_csv(content: Union[str, bytes]) -> Tuple[List[Column], List[SurveyRow]]:
    """
    Parse CSV content into header columns and respondent rows.

    Args:
        content: CSV text, or UTF-8 bytes (a BOM is tolerated)

    Returns:
        (columns, rows). Both are empty for input without any line.

    Raises:
        CSVParseError: If the content cannot be tokenized as CSV
    """
    text = _decode(content)

    try:
        records = [record for record in csv.reader(StringIO(text)) if record]
    except csv.Error as e:
        raise CSVParseError(f"Malformed CSV: {e}")

    if not records:
        return [], []

    header, body = records[0], records[1:]
    columns = clean_header(header)

    rows = []
    for record in body:
        values = {}
        for column, cell in zip(columns, record):
            values[column.raw] = cell
        rows.append(SurveyRow(values=values))

    return columns, rows


def parse_survey_file(filepath: str) -> Tuple[List[Column], List[SurveyRow]]:
    """
    Parse a CSV file into header columns and respondent rows.

    Raises:
        FileNotFoundError: If file doesn't exist
        CSVParseError: If parsing fails
    """
    try:
        with open(filepath, "rb") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    return parse_survey_csv(content)


__all__ = [
    "CSVParseError",
    "clean_header",
    "clean_header_name",
    "parse_survey_csv",
    "parse_survey_file",
]
