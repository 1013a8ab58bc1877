"""CSV formatter for weighted-coverage."""

import csv
import io
from typing import List

from ..models import AnalysisResult, Complexity, Metrics
from .base import BaseFormatter


def _metric_columns(metrics: Metrics) -> List[str]:
    row = [f"{metrics.coverage:.4f}"]
    for kind in Complexity:
        pair = metrics.for_kind(kind)
        row.extend(
            [
                f"{pair.complexity:.4f}",
                f"{pair.wcc:.4f}",
                f"{pair.crap:.4f}",
                f"{pair.skunk:.4f}",
                "true" if pair.is_complex else "false",
            ]
        )
    return row


class CsvFormatter(BaseFormatter):
    """Render one row per file, or per code space in ``functions`` mode."""

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result), end="")

    def format(self, result: AnalysisResult) -> str:
        functions = result.mode == "functions"
        output = io.StringIO()
        writer = csv.writer(output)

        header = ["file"]
        if functions:
            header += ["function", "kind", "start_line", "end_line"]
        header.append("coverage")
        for kind in Complexity:
            header += [
                f"{kind.value}_complexity",
                f"{kind.value}_wcc",
                f"{kind.value}_crap",
                f"{kind.value}_skunk",
                f"{kind.value}_is_complex",
            ]
        writer.writerow(header)

        for f in result.files:
            if not functions:
                writer.writerow([f.path] + _metric_columns(f.metrics))
                continue
            for space in f.functions:
                writer.writerow(
                    [f.path, space.name, space.kind.value, space.start_line, space.end_line]
                    + _metric_columns(space.metrics)
                )

        return output.getvalue()
