"""JSON formatter for weighted-coverage."""

import json
from typing import Any, Dict

from ..models import AnalysisResult, Complexity
from .base import BaseFormatter


def result_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """camelCase document of a run; code spaces only in ``functions`` mode."""
    include_functions = result.mode == "functions"
    return {
        "project": result.project_path,
        "mode": result.mode,
        "sortBy": result.sort_by,
        "thresholds": result.thresholds.to_dict(),
        "files": [f.to_dict(include_functions=include_functions) for f in result.files],
        "projectMetrics": result.project.to_dict(),
        "complexFilesCyclomatic": result.complex_files(Complexity.CYCLOMATIC),
        "complexFilesCognitive": result.complex_files(Complexity.COGNITIVE),
        "ignoredFiles": [{"name": i.path, "reason": i.reason} for i in result.ignored_files],
        "failed": result.failed,
    }


class JsonFormatter(BaseFormatter):
    """Render the result as JSON."""

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        return json.dumps(result_to_dict(result), indent=2)
