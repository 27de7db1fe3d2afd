"""ModSec Review - Log parsing"""

import ipaddress
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .models import NonRuleIssue, NormalLogEntry, RuleError
from .patterns import ERROR_LOG_PATTERNS, ISSUE_MODULE_PREFIXES, NORMAL_LOG_PATTERNS

ErrorRecord = Union[RuleError, NonRuleIssue]

_ERROR_RE = {name: re.compile(p) for name, p in ERROR_LOG_PATTERNS.items()}
_NORMAL_RE = {name: re.compile(p) for name, p in NORMAL_LOG_PATTERNS.items()}


def _tags(text: str) -> Dict[str, str]:
    tags: Dict[str, str] = {}
    for match in _ERROR_RE['tag'].finditer(text):
        # first occurrence wins, later [tag] blocks can repeat keys
        tags.setdefault(match.group('key'), match.group('value').replace('\\"', '"'))
    return tags


def _client_ip(token: str) -> str:
    """Drop the source port Apache appends to the client address"""
    address, sep, port = token.rpartition(':')
    if not sep or not port.isdigit():
        return token
    try:
        ipaddress.ip_address(address)
    except ValueError:
        return token
    return address


def _issue_type(module: str) -> Optional[str]:
    for prefix, issue_type in ISSUE_MODULE_PREFIXES.items():
        if module.startswith(prefix):
            return issue_type
    return None


def parse_error_line(line: str) -> Optional[ErrorRecord]:
    line = line.strip()
    if not line:
        return None

    header = _ERROR_RE['header'].match(line)
    if not header:
        return None
    date = header.group('date')
    body = line[header.end():]

    modsec = _ERROR_RE['modsec'].search(body)
    if modsec:
        tags = _tags(modsec.group('message'))
        if 'id' not in tags:
            return None
        client = _ERROR_RE['client'].search(body)
        return RuleError(
            id=tags['id'],
            msg=tags.get('msg', ''),
            hostname=tags.get('hostname', ''),
            ip=_client_ip(client.group('ip')) if client else '',
            data=tags.get('data', ''),
            date=date,
        )

    issue_type = _issue_type(header.group('module'))
    if issue_type:
        msg = _ERROR_RE['pid'].sub('', body, count=1)
        msg = _ERROR_RE['client'].sub('', msg, count=1).strip()
        return NonRuleIssue(type=issue_type, date=date, msg=msg)

    return None


def parse_normal_line(line: str) -> Optional[NormalLogEntry]:
    line = line.strip()
    if not line:
        return None

    for pattern in _NORMAL_RE.values():
        match = pattern.match(line)
        if match:
            groups = match.groupdict()
            return NormalLogEntry(
                ip=groups['ip'],
                date=groups['timestamp'],
                status_code=groups['status'],
                method=groups['method'],
                uri=groups['path'],
                user_agent=groups.get('user_agent') or '',
            )
    return None


def parse_error_log(lines: Iterable[str]) -> List[ErrorRecord]:
    return [record for record in map(parse_error_line, lines) if record is not None]


def parse_normal_log(lines: Iterable[str]) -> List[NormalLogEntry]:
    return [entry for entry in map(parse_normal_line, lines) if entry is not None]


def read_lines(filepath: str) -> List[str]:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Log file not found: {filepath}")
    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        return f.readlines()
