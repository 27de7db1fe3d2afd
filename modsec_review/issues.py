"""ModSec Review - Non-rule issue classification"""

from typing import Iterable, Union

from .models import ClassifiedIssues, NonRuleIssue, RuleError
from .patterns import RULE_TYPE


def classify(errors: Iterable[Union[RuleError, NonRuleIssue]]) -> ClassifiedIssues:
    """Split proxy/SSL issues from rule errors.

    Only rule errors carry the protected hostname, so with no rule errors in
    the input the hostname stays empty.
    """
    classified = ClassifiedIssues()
    for error in errors:
        if error.type != RULE_TYPE:
            classified.issues.append(error)
        elif not classified.hostname and error.hostname:
            classified.hostname = error.hostname
    return classified
