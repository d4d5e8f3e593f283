"""
Reading marketplace transaction exports.

Exports start with a few lines of free text (report name, date range, seller
details) before the real CSV header. slice_to_header() drops that preamble and
parse_records() turns the remainder into one read-only mapping per data row.
Parsing is best effort: problems are collected and logged, never raised.
"""

import csv
import io
import logging
import os
import re
from types import MappingProxyType

import pandas as pd

from .models import ParseResult

logger = logging.getLogger(__name__)

# Both must appear, quoted, on the header line
HEADER_ANCHORS = ['"Transaction creation date"', '"Payout ID"']

SUPPORTED_EXTENSIONS = ['.csv', '.txt']
ENCODINGS = ['utf-8-sig', 'utf-8', 'cp1252']

_LINE_BREAK = re.compile(r'\r?\n')


def slice_to_header(raw_text):
    """
    Cut an export down to its tabular part.

    Args:
        raw_text (str): Whole export, any line endings

    Returns:
        str: Text from the header line onward joined with '\\n', or the input
            unchanged when no header line is found
    """
    if raw_text is None:
        return ''
    lines = _LINE_BREAK.split(raw_text)
    for idx, line in enumerate(lines):
        if all(anchor in line for anchor in HEADER_ANCHORS):
            if idx:
                logger.debug(f"Skipping {idx} preamble lines before header")
            return '\n'.join(lines[idx:])
    logger.debug("No export header found, parsing text as-is")
    return raw_text


def _freeze(columns, values):
    return MappingProxyType(dict(zip(columns, values)))


def _fit_row(fields, width, errors):
    """
    Cut a row down to the header width.

    The extra fields are reported unless the only one is an empty trailing
    field left by a trailing delimiter.
    """
    extra = fields[width:]
    if extra and not (len(extra) == 1 and not str(extra[0]).strip()):
        errors.append(f"Truncated row with {len(fields)} fields to {width}, dropped extra values: {extra}")
    return fields[:width]


def _read_with_pandas(text, errors):
    width = len(pd.read_csv(io.StringIO(text), nrows=0, engine='python').columns)

    def on_bad_line(fields):
        return _fit_row(fields, width, errors)

    df = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        engine='python',
        on_bad_lines=on_bad_line,
    )
    if len(df) and not isinstance(df.index, pd.RangeIndex):
        # first data row was longer than the header and became an index
        raise ValueError("First data row has more fields than the header")
    df = df.fillna('')
    columns = [str(col).strip() for col in df.columns]
    records = [_freeze(columns, row) for row in df.itertuples(index=False, name=None)]
    return columns, records


def _read_with_csv(text, errors):
    """Row-by-row fallback that keeps whatever it can read."""
    reader = csv.reader(io.StringIO(text), delimiter=',', quotechar='"')
    columns = []
    records = []
    try:
        for row in reader:
            if not row:
                continue
            if not columns:
                columns = [col.strip() for col in row]
                continue
            row = _fit_row(row, len(columns), errors)
            row = row + [''] * (len(columns) - len(row))
            records.append(_freeze(columns, row))
    except csv.Error as e:
        errors.append(f"Stopped reading at line {reader.line_num}: {str(e)}")
    return columns, records


def parse_records(text):
    """
    Parse the tabular part of an export into records.

    The first line supplies the field names (trimmed). Blank lines are
    skipped, short rows are padded with '' and over-long rows are cut to
    the header width.
    When pandas cannot parse the text at all, a plain csv reader is used
    instead so that as many rows as possible survive.

    Args:
        text (str): Text starting at the header line

    Returns:
        ParseResult: Records in source order plus collected parse errors
    """
    if text is None:
        text = ''
    if text.startswith('\ufeff'):
        text = text[1:]
    if not text.strip():
        logger.info("Export is empty, nothing to parse")
        return ParseResult()

    errors = []
    try:
        columns, records = _read_with_pandas(text, errors)
    except (pd.errors.ParserError, csv.Error, ValueError) as e:
        errors = [f"Tabular parse failed: {str(e)}"]
        logger.warning(f"pandas could not parse export, falling back to csv reader: {str(e)}")
        columns, records = _read_with_csv(text, errors)

    for error in errors:
        logger.warning(f"Parse error: {error}")
    logger.info(f"Parsed {len(records)} records")
    logger.debug(f"Columns: {columns}")

    return ParseResult(records=records, errors=errors, columns=columns)


def parse_export(raw_text):
    """Locate the header in a raw export and parse the rows below it."""
    return parse_records(slice_to_header(raw_text))


def load_export(file_path):
    """
    Read an export file from disk as text.

    Args:
        file_path (str or Path): Path to the export

    Returns:
        str: Decoded file contents

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the path is a directory, has an unsupported extension,
            is empty or cannot be decoded
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    if os.path.isdir(file_path):
        raise ValueError("Path is a directory")

    _, ext = os.path.splitext(str(file_path))
    if ext.lower() not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported file format: {ext}")

    if os.path.getsize(file_path) == 0:
        raise ValueError(f"File is empty: {file_path}")

    with open(file_path, 'rb') as f:
        raw = f.read()

    for encoding in ENCODINGS:
        try:
            text = raw.decode(encoding)
            logger.debug(f"Read {file_path} with encoding: {encoding}")
            return text
        except UnicodeDecodeError:
            continue

    raise ValueError(f"Could not read {file_path} with any supported encoding")
