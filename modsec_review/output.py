"""ModSec Review - Report output"""

from typing import Dict, List, Mapping, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .correlator import rule_breakdown
from .fpfinder import rank_ips, rank_payloads
from .models import ClassifiedIssues, LookupResult, RuleGroup, RuleIPs
from .patterns import NO_LOOKUP, NO_RESULT, TOP_N
from .timestamps import format_clock


def _count_label(total: int, limit: int) -> str:
    return f"Top {limit} of {total}" if total > limit else str(total)


def render_fp_overview(groups: Mapping[str, RuleGroup], hostname: str) -> str:
    lines = [f"Reviewing ModSec logs for {hostname}", "IPs\tHits\tRule  \tMessage"]
    for group in groups.values():
        lines.append(f"{len(group.ip_stats):<3}\t{group.hits:<4}\t{group.id}\t{group.msg}")
    return "\n".join(lines) + "\n"


def render_fp_breakdown(groups: Mapping[str, RuleGroup], hostname: str,
                        lookups: Optional[Mapping[str, LookupResult]] = None,
                        limit: int = TOP_N) -> str:
    """Per rule: busiest IPs and rarest payloads.

    ``lookups`` is None when enrichment is off; an IP missing from it is
    shown as unresolved.
    """
    lines = [f"Reviewing detailed breakdown for {hostname}"]
    for group in groups.values():
        lines.append(f"{group.id} Breakdown - {group.msg}")

        lines.append(f" - IP Addresses ({_count_label(len(group.ip_stats), limit)})")
        for stats in rank_ips(group, limit):
            if lookups is None:
                hostname_label = NO_LOOKUP
            else:
                result = lookups.get(stats.ip)
                hostname_label = result.display() if result else NO_RESULT
            lines.append(f"\t - {stats.hits} - {stats.ip:<15}\t[{hostname_label}]")

        lines.append(f" - Data Match ({_count_label(len(group.payload_stats), limit)})")
        for payload in rank_payloads(group, limit):
            lines.append(f"\t - {payload.hits} - {payload.data}")
        lines.append("")
    return "\n".join(lines) + "\n"


def render_inspection(grouped: Mapping[str, RuleIPs], limit: int = TOP_N) -> str:
    lines: List[str] = []
    for rule_id, rule in grouped.items():
        lines.append(f"[{len(rule.ips)}] {rule_id} - {rule.msg}")
        for profile in rule.ips:
            lines.append(f"{profile.ip}'s activity")
            lines.append(f" - nslookup: {profile.lookup.display()}")
            lines.append(f" - user-agent: {profile.user_agent}")

            breakdown = rule_breakdown(profile, rule_id, limit)
            lines.append(f"Rule matches ({_count_label(breakdown.total, limit)}):")
            for match in breakdown.matches:
                lines.append(f" [{format_clock(match.date)}]: {match.data}")
            lines.append("")
            lines.append("Rejected requests:")
            for entry in breakdown.rejected:
                lines.append(f" [{format_clock(entry.date)}] [{entry.status_code}/{entry.method}]: {entry.uri}")
            lines.append("")
    return "\n".join(lines) + "\n" if lines else ""


def render_issues(classified: ClassifiedIssues) -> str:
    lines = [f"{len(classified.issues)} issues in {classified.hostname}"]
    for issue in classified.issues:
        lines.append(f"[{issue.date}] [{issue.type}]: {issue.msg}")
    return "\n".join(lines) + "\n"


def print_report(report: str, summary: Dict[str, int], console: Console):
    console.print("\n" + "═" * 70, style="cyan")
    console.print("              MODSEC REVIEW REPORT", style="bold cyan")
    console.print("═" * 70, style="cyan")

    console.print(Panel.fit(
        f"Rule Errors: [cyan]{summary.get('rule_errors', 0):,}[/]\n"
        f"Issues: [{'red' if summary.get('issues') else 'green'}]{summary.get('issues', 0):,}[/]\n"
        f"Requests: [cyan]{summary.get('requests', 0):,}[/]",
        title="Summary",
        border_style="cyan"
    ))

    console.print("\n" + "─" * 70, style="cyan")
    table = Table(box=box.ROUNDED)
    table.add_column("Distinct", style="cyan")
    table.add_column("Count", style="yellow")
    table.add_row("Rules", str(summary.get('rules', 0)))
    table.add_row("IP Addresses", str(summary.get('ips', 0)))
    console.print(table)

    console.print("\n" + "─" * 70, style="cyan")
    console.print(report, markup=False, highlight=False)
    console.print("═" * 70, style="cyan")
