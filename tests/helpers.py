# tests/helpers.py
import asyncio

from modsec_review.models import NormalLogEntry, RuleError

RULE_LINE = (
    '[Wed Mar 04 10:15:32.123456 2020] [:error] [pid 1234] [client 1.2.3.4:51234] [client 1.2.3.4] '
    'ModSecurity: Warning. detected SQLi using libinjection with fingerprint \'s&sos\' '
    '[file "/etc/modsecurity/rules/REQUEST-942-APPLICATION-ATTACK-SQLI.conf"] [line "68"] [id "942100"] '
    '[msg "SQL Injection Attack Detected via libinjection"] '
    '[data "Matched Data: s&sos found within ARGS:q: a\' OR \'1\'=\'1"] [severity "CRITICAL"] '
    '[hostname "example.com"] [uri "/search"] [unique_id "XmABCDEF"]'
)
PROXY_LINE = (
    '[Wed Mar 04 10:00:00.000000 2020] [proxy:error] [pid 99] (111)Connection refused: AH00957: '
    'HTTP: attempt to connect to 127.0.0.1:8080 (localhost) failed'
)
SSL_LINE = '[Wed Mar 04 10:01:00.000000 2020] [ssl:warn] [pid 99] AH01909: server certificate does NOT include an ID'
ACCESS_LINE = (
    '1.2.3.4 - - [04/Mar/2020:10:15:33 +0000] "GET /search?q=a HTTP/1.1" 403 199 "-" '
    '"Mozilla/5.0 (X11; Linux x86_64)"'
)


def rule_error(id="942100", ip="1.1.1.1", data="a' OR '1'='1",
               date="Wed Mar 04 10:15:00 2020", msg="SQL Injection Attack", hostname="example.com"):
    return RuleError(id=id, msg=msg, hostname=hostname, ip=ip, data=data, date=date)


def request(ip="1.1.1.1", date="04/Mar/2020:10:15:00 +0000", status="200",
            method="GET", uri="/", user_agent="curl/7.68.0"):
    return NormalLogEntry(ip=ip, date=date, status_code=status, method=method, uri=uri, user_agent=user_agent)


class FakeResolver:
    """Answers from a dict, raising OSError for anything it doesn't know"""

    def __init__(self, hosts=None, delay=0):
        self.hosts = hosts or {}
        self.delay = delay
        self.calls = []

    async def __call__(self, ip):
        self.calls.append(ip)
        if self.delay:
            await asyncio.sleep(self.delay)
        if ip not in self.hosts:
            raise OSError(1, "Unknown host")
        return self.hosts[ip]
