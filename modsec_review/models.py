"""ModSec Review - Data models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .patterns import NO_LOOKUP, NO_RESULT, RULE_TYPE


class ModSecReviewError(Exception):
    """Base error for review failures"""


class EmptyInputError(ModSecReviewError):
    """Raised when a review needs records it was not given"""

    def __init__(self, message: str = "no rule-error records available to determine hostname"):
        super().__init__(message)


@dataclass(frozen=True)
class RuleError:
    """Rule violation emitted by ModSecurity"""
    id: str
    msg: str
    hostname: str
    ip: str
    data: str
    date: str
    type: str = RULE_TYPE


@dataclass(frozen=True)
class NormalLogEntry:
    """Access log request"""
    ip: str
    date: str
    status_code: str
    method: str
    uri: str
    user_agent: str = ""


@dataclass(frozen=True)
class NonRuleIssue:
    """Proxy or SSL error unrelated to rule matching"""
    type: str
    date: str
    msg: str
    hostname: Optional[str] = None


class LookupState(Enum):
    RESOLVED = "resolved"
    NOT_ATTEMPTED = "not-attempted"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a reverse lookup for one IP"""
    state: LookupState
    hostname: Optional[str] = None

    @classmethod
    def resolved(cls, hostname: str) -> 'LookupResult':
        return cls(LookupState.RESOLVED, hostname)

    @classmethod
    def not_attempted(cls) -> 'LookupResult':
        return cls(LookupState.NOT_ATTEMPTED)

    @classmethod
    def failed(cls) -> 'LookupResult':
        return cls(LookupState.FAILED)

    def display(self) -> str:
        if self.state is LookupState.RESOLVED:
            return self.hostname
        if self.state is LookupState.NOT_ATTEMPTED:
            return NO_LOOKUP
        return NO_RESULT


@dataclass
class IPStats:
    """Hits and payloads of one IP within a rule group"""
    ip: str
    hits: int = 0
    payloads: List[str] = field(default_factory=list)

    def collect(self, rule_error: RuleError) -> None:
        self.payloads.append(rule_error.data)
        self.hits += 1


@dataclass
class PayloadStats:
    """Hits and sources of one payload within a rule group"""
    data: str
    last_seen: str
    hits: int = 0
    ip_list: List[str] = field(default_factory=list)


@dataclass
class RuleGroup:
    """Every violation of a single rule id"""
    id: str
    msg: str
    hits: int = 0
    ip_stats: Dict[str, IPStats] = field(default_factory=dict)
    payload_stats: Dict[str, PayloadStats] = field(default_factory=dict)


@dataclass
class IPProfile:
    """Rule violations and traffic of one client IP"""
    ip: str
    lookup: LookupResult = field(default_factory=LookupResult.not_attempted)
    user_agent: str = ""
    broken_rules: List[RuleError] = field(default_factory=list)
    all_activity: List[NormalLogEntry] = field(default_factory=list)
    rejected_requests: List[NormalLogEntry] = field(default_factory=list)


@dataclass
class RuleIPs:
    """Profiles of every IP that broke a rule"""
    msg: str
    ips: List[IPProfile] = field(default_factory=list)


@dataclass
class RuleBreakdown:
    """Activity of one IP around one rule"""
    rule_id: str
    matches: List[RuleError]
    total: int
    rejected: List[NormalLogEntry]


@dataclass
class ClassifiedIssues:
    """Non-rule issues plus the protected hostname"""
    issues: List[NonRuleIssue] = field(default_factory=list)
    hostname: str = ""
