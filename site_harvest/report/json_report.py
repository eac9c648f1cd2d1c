# site_harvest/report/json_report.py

"""
JSON export of a crawl result.

Writes the same ``{success, baseUrl|sitemapUrl, pagesCount, ..., pages}``
mapping that the CLI prints to stdout.
"""
import json
from pathlib import Path
from typing import Any, Dict, Union

from site_harvest.aggregator import CrawlResult


def render_json(result: Union[CrawlResult, Dict[str, Any]], output_path: Union[Path, str]) -> Path:
    """
    Save *result* as UTF-8 JSON at *output_path* and return the path.

    Example:
    ```python
    from site_harvest.report.json_report import render_json
    report_path = render_json(result, 'reports/crawl.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = result.to_dict() if isinstance(result, CrawlResult) else result

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
