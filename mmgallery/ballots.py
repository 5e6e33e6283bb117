"""
BallotTally - Parses ballot files and ranks the choices by vote count.

A ballot file holds one ballot per line:

    voter:choice1.jpg:choice2.png:...

The voter field is not interpreted. Every choice occurrence counts as one
vote, including repeats within the same line.
"""

import csv
import io
import logging
import os
from collections import Counter
from typing import Iterable, List, Union

from .errors import FilesystemError, ParseError
from .models import RankedResult

logger = logging.getLogger(__name__)

BALLOT_FILE = 'votes.txt'
FIELD_DELIMITER = ':'

BallotSource = Union[str, bytes, Iterable[str]]


def tally(records: Iterable[List[str]]) -> Counter:
    """Count choice occurrences across ballot records, ignoring the voter field."""
    votes = Counter()
    for record in records:
        votes.update(record[1:])
    return votes


def rank(votes: Counter) -> List[RankedResult]:
    """Sort tallied votes by count descending, then file name ascending."""
    ordered = sorted(votes.items(), key=lambda kv: (-kv[1], kv[0]))
    return [
        RankedResult(file_name=name, votes=count, rank=position)
        for position, (name, count) in enumerate(ordered, start=1)
    ]


def parse_ballots(content: BallotSource, delimiter: str = FIELD_DELIMITER) -> List[RankedResult]:
    """
    Parse ballot content and return the ranked results.
    
    Args:
        content: Ballot text, raw UTF-8 bytes or an iterable of lines
        delimiter: Field delimiter (default: ':')
        
    Returns:
        Ranked results, empty for empty content
        
    Raises:
        ParseError: If the content is not valid UTF-8 or not valid delimited text
    """
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ParseError(f"Ballots are not valid UTF-8: {e}") from e
    if isinstance(content, str):
        content = io.StringIO(content, newline='')
    
    reader = csv.reader(content, delimiter=delimiter, strict=True)
    try:
        votes = tally(reader)
    except csv.Error as e:
        raise ParseError(f"Malformed ballot on line {reader.line_num}: {e}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"Ballots are not valid UTF-8: {e}") from e
    return rank(votes)


def read_ballot_file(period_dir: str, file_name: str = BALLOT_FILE) -> List[RankedResult]:
    """
    Tally the ballot file of a period folder.
    
    Args:
        period_dir: Path of the period folder
        file_name: Ballot file name (default: votes.txt)
        
    Returns:
        Ranked results, empty if the file is missing or empty
        
    Raises:
        ParseError: If the file content cannot be parsed
        FilesystemError: If the file exists but cannot be read
    """
    path = os.path.join(period_dir, file_name)
    if not os.path.exists(path):
        logger.debug(f"No ballot file in {period_dir}")
        return []
    try:
        with open(path, encoding='utf-8', newline='') as f:
            try:
                return parse_ballots(f)
            except ParseError as e:
                raise ParseError(f"{path}: {e}") from e
    except OSError as e:
        raise FilesystemError(f"Cannot read ballot file {path}: {e}") from e
