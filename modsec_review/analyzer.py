"""ModSec Review - Review pipeline"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .correlator import correlate, group_by_rule
from .fpfinder import aggregate
from .issues import classify
from .lookup import ReverseLookupCache
from .models import EmptyInputError, NormalLogEntry, RuleError
from .output import render_fp_breakdown, render_fp_overview, render_inspection, render_issues
from .parser import ErrorRecord, parse_error_log, parse_normal_log, read_lines
from .patterns import RULE_TYPE, TOP_N

logger = logging.getLogger(__name__)


@dataclass
class ReviewOptions:
    lookup: bool = True
    lookup_timeout: Optional[float] = None
    top_n: int = TOP_N


def rule_errors_of(errors: Sequence[ErrorRecord]) -> List[RuleError]:
    return [e for e in errors if e.type == RULE_TYPE]


class ModSecReviewer:
    """Runs the false positive, inspection and issue reviews.

    One lookup cache is shared by every review run through the same
    reviewer, so an IP is resolved at most once.
    """

    def __init__(self, options: Optional[ReviewOptions] = None, cache: Optional[ReverseLookupCache] = None):
        self.options = options or ReviewOptions()
        if cache is None:
            cache = ReverseLookupCache(timeout=self.options.lookup_timeout)
        self.cache = cache

    async def review_false_positives(self, rule_errors: Sequence[RuleError]) -> str:
        if not rule_errors:
            raise EmptyInputError()
        groups = aggregate(rule_errors)
        hostname = rule_errors[0].hostname

        lookups = None
        if self.options.lookup:
            ips = (ip for group in groups.values() for ip in group.ip_stats)
            lookups = await self.cache.resolve_many(ips)

        overview = render_fp_overview(groups, hostname)
        breakdown = render_fp_breakdown(groups, hostname, lookups, self.options.top_n)
        return f"{overview}\n{breakdown}"

    async def inspect(self, normal_logs: Sequence[NormalLogEntry], rule_errors: Sequence[RuleError]) -> str:
        profiles = await correlate(rule_errors, normal_logs, self.options.lookup, self.cache)
        grouped = group_by_rule(profiles, rule_errors)
        return render_inspection(grouped, self.options.top_n)

    def review_issues(self, errors: Sequence[ErrorRecord]) -> str:
        return render_issues(classify(errors))

    async def review_all(self, errors: Sequence[ErrorRecord], normal_logs: Sequence[NormalLogEntry]) -> str:
        rule_errors = rule_errors_of(errors)
        fp = await self.review_false_positives(rule_errors)
        bugs = self.review_issues(errors)
        inspected = await self.inspect(normal_logs, rule_errors)
        return f"{fp}\n{bugs}\n{inspected}"


def load_error_log(filepath: str) -> List[ErrorRecord]:
    records = parse_error_log(read_lines(filepath))
    logger.info("parsed %d error records from %s", len(records), filepath)
    return records


def load_normal_log(filepath: str) -> List[NormalLogEntry]:
    entries = parse_normal_log(read_lines(filepath))
    logger.info("parsed %d requests from %s", len(entries), filepath)
    return entries


def summarize(errors: Sequence[ErrorRecord] = (), normal_logs: Sequence[NormalLogEntry] = ()) -> Dict[str, int]:
    rule_errors = rule_errors_of(errors)
    return {
        'rule_errors': len(rule_errors),
        'issues': len(errors) - len(rule_errors),
        'requests': len(normal_logs),
        'rules': len({e.id for e in rule_errors}),
        'ips': len({e.ip for e in rule_errors}),
    }
