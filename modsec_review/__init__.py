"""ModSec Review package"""

from .patterns import VERSION, NO_LOOKUP, NO_RESULT, TOP_N
from .models import (
    ClassifiedIssues, EmptyInputError, IPProfile, LookupResult, LookupState,
    ModSecReviewError, NonRuleIssue, NormalLogEntry, RuleError, RuleGroup,
)
from .lookup import ReverseLookupCache
from .fpfinder import aggregate, rank_ips, rank_payloads
from .correlator import correlate, group_by_rule, rule_breakdown
from .issues import classify
from .analyzer import ModSecReviewer, ReviewOptions
from .output import print_report

__all__ = [
    'VERSION', 'NO_LOOKUP', 'NO_RESULT', 'TOP_N',
    'RuleError', 'NormalLogEntry', 'NonRuleIssue', 'IPProfile', 'RuleGroup',
    'ClassifiedIssues', 'LookupResult', 'LookupState',
    'ModSecReviewError', 'EmptyInputError',
    'ReverseLookupCache', 'aggregate', 'rank_ips', 'rank_payloads',
    'correlate', 'group_by_rule', 'rule_breakdown', 'classify',
    'ModSecReviewer', 'ReviewOptions', 'print_report',
]
