"""ModSec Review - False positive aggregation

Rule violations are grouped by rule id, then by client IP and by the payload
that matched. A rule hit by many IPs with the same payload is a likely false
positive; a rare payload from a single IP is worth a closer look.
"""

import logging
from typing import Dict, Iterable, List

from .models import EmptyInputError, IPStats, PayloadStats, RuleError, RuleGroup
from .patterns import TOP_N
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)


def _is_later(candidate: str, current: str) -> bool:
    new = parse_timestamp(candidate)
    if new is None:
        return False
    old = parse_timestamp(current)
    return old is None or new >= old


def collect(group: RuleGroup, rule_error: RuleError) -> RuleGroup:
    """Fold one violation into its rule group"""
    ip_stats = group.ip_stats.get(rule_error.ip)
    if ip_stats is None:
        ip_stats = group.ip_stats[rule_error.ip] = IPStats(ip=rule_error.ip)
    ip_stats.collect(rule_error)

    payload = group.payload_stats.get(rule_error.data)
    if payload is None:
        payload = group.payload_stats[rule_error.data] = PayloadStats(
            data=rule_error.data, last_seen=rule_error.date)
    elif _is_later(rule_error.date, payload.last_seen):
        payload.last_seen = rule_error.date
    payload.ip_list.append(rule_error.ip)
    payload.hits += 1

    group.hits += 1
    return group


def aggregate(rule_errors: Iterable[RuleError]) -> Dict[str, RuleGroup]:
    groups: Dict[str, RuleGroup] = {}
    count = 0
    for rule_error in rule_errors:
        group = groups.get(rule_error.id)
        if group is None:
            group = groups[rule_error.id] = RuleGroup(id=rule_error.id, msg=rule_error.msg)
        collect(group, rule_error)
        count += 1

    if not count:
        raise EmptyInputError()

    logger.info("grouped %d rule errors into %d rules", count, len(groups))
    return groups


def rank_ips(group: RuleGroup, limit: int = TOP_N) -> List[IPStats]:
    """Most active IPs first, ties kept in first-seen order"""
    return sorted(group.ip_stats.values(), key=lambda s: s.hits, reverse=True)[:limit]


def rank_payloads(group: RuleGroup, limit: int = TOP_N) -> List[PayloadStats]:
    """Rarest payloads first, ties kept in first-seen order"""
    return sorted(group.payload_stats.values(), key=lambda s: s.hits)[:limit]
