"""ModSec Review - Activity correlation

Builds a profile for every IP that broke at least one rule, overlays the
access log on top of those profiles, and regroups them by rule id. IPs that
only show up in the access log are not tracked.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .lookup import ReverseLookupCache
from .models import IPProfile, LookupResult, NormalLogEntry, RuleBreakdown, RuleError, RuleIPs
from .patterns import SUCCESS_STATUS, TOP_N
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)


def build_profiles(rule_errors: Iterable[RuleError]) -> Dict[str, IPProfile]:
    profiles: Dict[str, IPProfile] = {}
    for rule_error in rule_errors:
        profile = profiles.get(rule_error.ip)
        if profile is None:
            profile = profiles[rule_error.ip] = IPProfile(ip=rule_error.ip)
        profile.broken_rules.append(rule_error)
    return profiles


def overlay_activity(profiles: Dict[str, IPProfile], normal_logs: Iterable[NormalLogEntry]) -> Dict[str, IPProfile]:
    for entry in normal_logs:
        profile = profiles.get(entry.ip)
        if profile is None:
            continue
        profile.all_activity.append(entry)
        if entry.status_code != SUCCESS_STATUS:
            profile.rejected_requests.append(entry)
        if not profile.user_agent and entry.user_agent:
            profile.user_agent = entry.user_agent
    return profiles


async def correlate(rule_errors: Sequence[RuleError],
                    normal_logs: Iterable[NormalLogEntry],
                    enrichment: bool = True,
                    cache: Optional[ReverseLookupCache] = None) -> Dict[str, IPProfile]:
    """Profile every IP in ``rule_errors``.

    When enrichment is on, every reverse lookup for the new IPs is awaited
    before the access log is overlaid, so each profile leaves here with a
    settled lookup result.
    """
    profiles = build_profiles(rule_errors)

    if enrichment:
        cache = cache if cache is not None else ReverseLookupCache()
        lookups = await cache.resolve_many(profiles)
        for ip, result in lookups.items():
            profiles[ip].lookup = result
    else:
        for profile in profiles.values():
            profile.lookup = LookupResult.not_attempted()

    overlay_activity(profiles, normal_logs)
    logger.info("correlated %d rule errors across %d IPs", len(rule_errors), len(profiles))
    return profiles


def group_by_rule(profiles: Dict[str, IPProfile], rule_errors: Iterable[RuleError]) -> Dict[str, RuleIPs]:
    grouped: Dict[str, RuleIPs] = {}
    seen: Dict[str, set] = {}
    for rule_error in rule_errors:
        profile = profiles.get(rule_error.ip)
        if profile is None:
            continue
        group = grouped.get(rule_error.id)
        if group is None:
            group = grouped[rule_error.id] = RuleIPs(msg=rule_error.msg)
            seen[rule_error.id] = set()
        if profile.ip not in seen[rule_error.id]:
            seen[rule_error.id].add(profile.ip)
            group.ips.append(profile)
    return grouped


def rule_breakdown(profile: IPProfile, rule_id: str, limit: int = TOP_N) -> RuleBreakdown:
    """Violations of ``rule_id`` by this IP and the requests rejected meanwhile.

    The window runs from the first to the last readable violation timestamp
    in log order, both ends included, and is empty when the first comes after
    the last. Records whose timestamps can't be read never fall inside a
    window.
    """
    matches: List[RuleError] = [r for r in profile.broken_rules if r.id == rule_id]
    stamps = [s for s in (parse_timestamp(r.date) for r in matches) if s is not None]

    rejected: List[NormalLogEntry] = []
    if stamps:
        start, end = stamps[0], stamps[-1]
        for entry in profile.rejected_requests:
            when = parse_timestamp(entry.date)
            if when is not None and start <= when <= end:
                rejected.append(entry)

    return RuleBreakdown(rule_id=rule_id, matches=matches[:limit], total=len(matches), rejected=rejected)
