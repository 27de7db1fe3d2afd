"""ModSec Review - Constants and patterns"""

VERSION = "1.0.0"

# Status code of an accepted request, anything else counts as rejected
SUCCESS_STATUS = "200"

# Discriminant carried by rule-violation records
RULE_TYPE = "rule"

# Lookup sentinels rendered in reports
NO_LOOKUP = "no-lookup"
NO_RESULT = "null"

# Rows rendered per ranked list
TOP_N = 10

# Timestamp layouts seen in error logs, access logs and hand-made fixtures
TIMESTAMP_FORMATS = [
    '%a %b %d %H:%M:%S.%f %Y',
    '%a %b %d %H:%M:%S %Y',
    '%d/%b/%Y:%H:%M:%S %z',
    '%d/%b/%Y:%H:%M:%S',
]

# Apache error log carrying ModSecurity entries
ERROR_LOG_PATTERNS = {
    'header': r'^\[(?P<date>[^\]]+)\]\s+\[(?P<module>[^\]:]*):?(?P<level>[^\]]*)\]',
    'modsec': r'ModSecurity:\s*(?P<message>.*)',
    'client': r'\[client (?P<ip>[0-9a-fA-F:.]+)\]',
    'tag': r'\[(?P<key>\w+) "(?P<value>(?:[^"\\]|\\.)*)"\]',
    'pid': r'\[pid [^\]]*\]\s*',
}

# Module name prefixes whose error lines are reported as non-rule issues
# (proxy_http, proxy_fcgi, proxy_balancer, ...)
ISSUE_MODULE_PREFIXES = {
    'proxy': 'proxy',
    'ssl': 'ssl',
}

# Access log formats
NORMAL_LOG_PATTERNS = {
    'combined': r'^(?P<ip>\S+) \S+ \S+ \[(?P<timestamp>[^\]]+)\] "(?P<method>\S+) (?P<path>\S+)(?: \S+)?" (?P<status>\d{3}) \S+ "(?P<referrer>[^"]*)" "(?P<user_agent>[^"]*)"',
    'common': r'^(?P<ip>\S+) \S+ \S+ \[(?P<timestamp>[^\]]+)\] "(?P<method>\S+) (?P<path>\S+)(?: \S+)?" (?P<status>\d{3})',
}
