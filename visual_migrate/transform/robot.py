"""Robot Framework (.robot) keyword rewriter.

Robot suites have no grammar here; keywords are matched per line.
Only Sauce Labs Visual ships Robot keywords:

  Visual Snapshot    <args>     →  SmartUI Snapshot    <args>
  Create Visual Build ...       →  (line removed)
  Finish Visual Build ...       →  (line removed)
"""

import logging
import re
from typing import Optional

from visual_migrate.types import SAUCE_LABS, TransformationResult, TransformationWarning

logger = logging.getLogger(__name__)

_SNAPSHOT_KEYWORD = re.compile(r"^(\s+)Visual Snapshot(?:\s{2,}|\t)(.+)$")
_BUILD_KEYWORD = re.compile(r"^\s+(?:Create|Finish) Visual Build\b")

SMARTUI_KEYWORD = "SmartUI Snapshot"
UNSUPPORTED_DETAILS = "Currently only Sauce Labs Visual Robot Framework files are supported."


class RobotRewriter:
    def __init__(self, platform: str, framework: str, file_path: Optional[str] = None):
        self.platform = platform
        self.framework = framework
        self.file_path = file_path

    def run(self, source_text: str) -> TransformationResult:
        if self.platform != SAUCE_LABS:
            return TransformationResult(
                content=source_text,
                warnings=[TransformationWarning(
                    message=f"Robot Framework transformation is not available for {self.platform}",
                    details=UNSUPPORTED_DETAILS,
                    file=self.file_path,
                )],
            )

        lines: list[str] = []
        count = 0
        for line in source_text.splitlines(keepends=True):
            body = line.rstrip("\r\n")
            ending = line[len(body):]
            if _BUILD_KEYWORD.match(body):
                continue
            match = _SNAPSHOT_KEYWORD.match(body)
            if match:
                count += 1
                line = f"{match.group(1)}{SMARTUI_KEYWORD}    {match.group(2)}{ending}"
            lines.append(line)

        if not count and len(lines) == len(source_text.splitlines()):
            return TransformationResult(content=source_text, warnings=[])

        logger.debug("Rewrote %d Robot snapshot keywords in %s", count, self.file_path or "<source>")
        return TransformationResult(content="".join(lines), warnings=[], snapshot_count=count)
