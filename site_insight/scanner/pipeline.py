"""
Scan pipeline.

Runs the four analysis tasks for one page and merges their results into a
single analysis record. A task that hits a remote or payload error is
marked failed; the sections produced by the other tasks are kept.
"""

import asyncio
import uuid
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..analyzer.accessibility import analyze_accessibility, calculate_alt_text_score
from ..analyzer.colors import ColorExtractor
from ..analyzer.contrast import ContrastEvaluator
from ..analyzer.images import ImageAnalyzer
from ..analyzer.pagespeed import Fetcher, fetch_psi_data
from ..analyzer.palette import group_by_frequency
from ..analyzer.security import calculate_security_score, extract_security_headers
from ..analyzer.seo import SEOExtractor
from ..analyzer.social import (
    check_links,
    detect_cookie_scripts,
    detect_minification,
    detect_social_meta,
)
from ..exceptions import SiteInsightError
from ..report.record import Analysis, ComplianceStatus, create_default_analysis, merge_analysis
from ..utils.constants import DEFAULT_STRATEGY
from ..utils.log import get_logger
from ..utils.urls import normalize_url
from .tasks import TaskRecord, TaskStatus, TaskType, create_scan_tasks, scan_status


# Security score below which a page with accessibility findings fails
FAIL_SECURITY_SCORE = 40
# Security score a page needs, with no findings, to pass
PASS_SECURITY_SCORE = 80


@dataclass
class ScanResult:
    """Outcome of one pipeline run."""
    scan_id: str
    analysis: Analysis
    tasks: List[TaskRecord] = field(default_factory=list)

    @property
    def failed_tasks(self) -> List[TaskRecord]:
        return [task for task in self.tasks if task.status == TaskStatus.FAILED]


def derive_compliance_status(record: Analysis) -> ComplianceStatus:
    """
    Decide a page's compliance verdict.

    Fails when accessibility findings meet weak security headers, passes
    when there are no findings and strong headers, warns otherwise.
    """
    ui = record.data.get('ui') or {}
    technical = record.data.get('technical') or {}
    findings = (
        len(ui.get('contrastIssues') or [])
        + len((technical.get('accessibility') or {}).get('violations') or [])
    )
    security_score = technical.get('securityScore') or 0

    if findings and security_score < FAIL_SECURITY_SCORE:
        return ComplianceStatus.FAIL
    if not findings and security_score >= PASS_SECURITY_SCORE:
        return ComplianceStatus.PASS
    return ComplianceStatus.WARN


class AnalysisPipeline:
    """
    Runs every analysis task for a page.

    Tasks run concurrently; their fragments are merged in task order, and
    since each task owns its own sections the order does not change the
    result.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        strategy: str = DEFAULT_STRATEGY,
        run_pagespeed: bool = True,
        check_links: bool = False
    ):
        """
        Initialize the pipeline.

        Args:
            api_key: Optional PageSpeed API key
            strategy: PageSpeed strategy ('mobile' or 'desktop')
            run_pagespeed: Query PageSpeed Insights in the perf task
            check_links: Send a HEAD request per anchor in the tech task
        """
        self.api_key = api_key
        self.strategy = strategy
        self.run_pagespeed = run_pagespeed
        self.check_links = check_links

        self.logger = get_logger("pipeline")

        self.color_extractor = ColorExtractor()
        self.contrast_evaluator = ContrastEvaluator()
        self.seo_extractor = SEOExtractor()
        self.image_analyzer = ImageAnalyzer()

    async def run(
        self,
        url: str,
        html: str,
        headers: Any = None,
        fetcher: Optional[Fetcher] = None,
        scan_id: Optional[str] = None
    ) -> ScanResult:
        """
        Analyze a page.

        Args:
            url: Page URL
            html: Page markup
            headers: Response headers (mapping or header object)
            fetcher: Fetch capability for PageSpeed and link checks
            scan_id: Scan identifier (default: random UUID)

        Returns:
            ScanResult with the merged record and the finished tasks
        """
        url = normalize_url(url)
        scan_id = scan_id or str(uuid.uuid4())
        tasks = create_scan_tasks(scan_id)
        self.logger.info(f"Scan {scan_id}: analyzing {url}")

        workers: Dict[TaskType, Callable[[], Awaitable[Dict[str, Any]]]] = {
            TaskType.TECH: lambda: self._run_tech(url, html, headers, fetcher),
            TaskType.COLORS: lambda: self._run_colors(url, html),
            TaskType.SEO: lambda: self._run_seo(html),
            TaskType.PERF: lambda: self._run_perf(url, fetcher),
        }

        await asyncio.gather(*(self._execute(task, workers[task.type]) for task in tasks))

        record = create_default_analysis(url)
        for task in tasks:
            if task.status == TaskStatus.COMPLETE and task.payload:
                record = merge_analysis(record, task.payload)

        record = merge_analysis(record, {
            'status': scan_status(tasks).value,
            'complianceStatus': derive_compliance_status(record).value,
            'data': {'overview': self._overview(record, tasks)},
        })

        failed = [task.type.value for task in tasks if task.status == TaskStatus.FAILED]
        if failed:
            self.logger.warning(f"Scan {scan_id}: failed tasks: {', '.join(failed)}")
        else:
            self.logger.info(f"Scan {scan_id}: all tasks complete")

        return ScanResult(scan_id=scan_id, analysis=record, tasks=tasks)

    async def _execute(
        self,
        task: TaskRecord,
        worker: Callable[[], Awaitable[Dict[str, Any]]]
    ) -> None:
        """Run one task, recording its fragment or its error."""
        task.start()
        try:
            fragment = await worker()
        except SiteInsightError as e:
            self.logger.warning(f"{task.type.value} task failed: {e}")
            task.fail(str(e))
            return
        task.complete(fragment)

    async def _run_tech(
        self,
        url: str,
        html: str,
        headers: Any,
        fetcher: Optional[Fetcher]
    ) -> Dict[str, Any]:
        security_headers = extract_security_headers(headers)
        violations = analyze_accessibility(html)

        technical: Dict[str, Any] = {
            'securityScore': calculate_security_score(security_headers),
            'accessibility': {'violations': [v.to_dict() for v in violations]},
            'social': detect_social_meta(html).to_dict(),
            'cookies': detect_cookie_scripts(html).to_dict(),
            'minification': detect_minification(html).to_dict(),
        }

        if self.check_links and fetcher is not None:
            technical['linkIssues'] = (await check_links(html, url, fetcher)).to_dict()

        return {
            'securityHeaders': security_headers.to_dict(),
            'data': {'technical': technical},
        }

    async def _run_colors(self, url: str, html: str) -> Dict[str, Any]:
        palette = self.color_extractor.extract_palette(html)
        fonts = Counter(self.color_extractor.extract_font_families(html))
        images = self.image_analyzer.analyze(html, base_url=url)
        contrast_issues = self.contrast_evaluator.extract_contrast_issues(html)

        return {
            'data': {
                'ui': {
                    'colors': [entry.to_dict() for entry in palette],
                    'colorGroups': [group.to_dict() for group in group_by_frequency(palette)],
                    'fonts': [{'name': name, 'count': count} for name, count in fonts.items()],
                    'images': [image.to_dict() for image in images.images],
                    'imageAnalysis': images.to_dict(),
                    'altTextScore': calculate_alt_text_score(images.alt_stats),
                    'contrastIssues': [issue.to_dict() for issue in contrast_issues],
                },
            },
        }

    async def _run_seo(self, html: str) -> Dict[str, Any]:
        return self.seo_extractor.extract(html).as_fragment()

    async def _run_perf(self, url: str, fetcher: Optional[Fetcher]) -> Dict[str, Any]:
        if not self.run_pagespeed:
            self.logger.info("PageSpeed disabled, skipping")
            return {}
        if fetcher is None:
            raise SiteInsightError("No fetcher configured for PageSpeed Insights")

        result = await fetch_psi_data(url, fetcher, api_key=self.api_key, strategy=self.strategy)
        return result.as_fragment()

    def _overview(self, record: Analysis, tasks: List[TaskRecord]) -> Dict[str, Any]:
        """Summarize the merged sections into the overview section."""
        seo_score = (record.data.get('seo') or {}).get('score') or 0
        technical = record.data.get('technical') or {}
        ui = record.data.get('ui') or {}

        scores = [seo_score, technical.get('securityScore') or 0]
        perf = next(task for task in tasks if task.type == TaskType.PERF)
        if perf.status == TaskStatus.COMPLETE and perf.payload:
            scores.append(record.performance_score * 100)

        mobile = (record.data.get('performance') or {}).get('mobileResponsive')
        ux_scores = [ui.get('altTextScore', 100), 100 if mobile else 0]

        page_load = f"{record.core_web_vitals.lcp:.1f}s" if record.core_web_vitals.lcp else ''
        return {
            'overallScore': round(sum(scores) / len(scores)),
            'pageLoadTime': page_load,
            'seoScore': seo_score,
            'userExperienceScore': round(sum(ux_scores) / len(ux_scores)),
        }
