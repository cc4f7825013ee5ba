"""
Known-Issues Registry

Maps the full path of a test (``package.Step.test``) to the identifier of the
defect tracking its failure. A failing test found in the registry is reported
as a known issue: the original error is wrapped in a KnownIssueError carrying
the tracking id, so reports can tell product regressions from tracked defects.

The registry is loaded once per run from a flat ``key=value`` properties file;
a missing file means no known issue. A ``.json`` file holding an object of
the same pairs is accepted as well.

Example file (known-issues.properties):
    # Title truncated on narrow screens
    acme.scenario.StepA02_Navigation.test03_CheckTitle=DEF-1234
    acme.scenario.StepB01_Reports.test01_Export : DEF-1301
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from attr import attrs, attrib

from ..common.errors import KnownIssueError
from .models import TestId

logger = logging.getLogger(__name__)


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse a flat properties text.

    Blank lines and lines starting with '#' or '!' are ignored. Keys and
    values are separated by the first '=' or ':' and stripped.
    """
    entries: Dict[str, str] = {}
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(('#', '!')):
            continue
        separators = [index for index in (line.find('='), line.find(':')) if index > 0]
        if not separators:
            logger.warning(f"Ignoring malformed known-issues line {line_number}: '{raw_line}'")
            continue
        index = min(separators)
        key, value = line[:index].strip(), line[index + 1:].strip()
        if key and value:
            entries[key] = value
    return entries


def _freeze(entries: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(entries))


@attrs(frozen=True, eq=False)
class KnownIssues:
    """
    Immutable map of full test paths to tracking ids.

    Attributes:
        issues: fullTestPath -> trackingId
    """
    issues: Mapping[str, str] = attrib(factory=dict, converter=_freeze)

    def __len__(self) -> int:
        return len(self.issues)

    def tracking_id(self, test: Union[TestId, str]) -> Optional[str]:
        path = test.full_test_path if isinstance(test, TestId) else test
        return self.issues.get(path)

    def triage(self, test_id: TestId, error: BaseException) -> Optional[KnownIssueError]:
        """
        Classify a test failure.

        Returns:
            A KnownIssueError wrapping the error (with its traceback) when the
            test is a known issue, None when the failure is unknown
        """
        tracking_id = self.tracking_id(test_id)
        if tracking_id is None:
            logger.info(f"{test_id.full_test_path}: this is an unknown issue.")
            return None
        logger.info(f"{test_id.full_test_path}: known issue tracked by {tracking_id}")
        known = KnownIssueError(error, tracking_id)
        return known.with_traceback(error.__traceback__)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> "KnownIssues":
        """
        Load the registry from a properties (or JSON) file.

        Args:
            filepath: Path to the registry file; a missing file yields an empty registry

        Raises:
            ValueError: If a JSON registry is invalid
        """
        path = Path(filepath)
        if not path.exists():
            logger.debug(f"[KnownIssues.load] no known-issues file at '{path}'")
            return cls()

        text = path.read_text(encoding='utf-8')
        if path.suffix.lower() == '.json':
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError(f"Known-issues file '{path}' must hold a JSON object")
            entries = {str(key): str(value) for key, value in data.items()}
        else:
            entries = parse_properties(text)
        logger.info(f"Loaded {len(entries)} known issue(s) from '{path}'")
        return cls(entries)
