# tests/conftest.py
import pytest

from modsec_review.models import NonRuleIssue

from helpers import FakeResolver, rule_error, request


@pytest.fixture
def resolver():
    return FakeResolver({"1.1.1.1": "one.one.one.one", "8.8.8.8": "dns.google"})


@pytest.fixture
def sample_errors():
    return [
        rule_error(id="942100", ip="1.1.1.1", data="a' OR '1'='1", date="Wed Mar 04 10:15:00 2020"),
        rule_error(id="942100", ip="8.8.8.8", data="1 UNION SELECT", date="Wed Mar 04 10:16:00 2020"),
        rule_error(id="920100", ip="2.2.2.2", data="GET /x HTTP/0.1", date="Wed Mar 04 10:20:00 2020",
                   msg="Invalid HTTP Request Line"),
        rule_error(id="942100", ip="1.1.1.1", data="a' OR '1'='1", date="Wed Mar 04 10:17:00 2020"),
        rule_error(id="920100", ip="2.2.2.2", data="GET /y HTTP/0.1", date="Wed Mar 04 10:30:00 2020",
                   msg="Invalid HTTP Request Line"),
    ]


@pytest.fixture
def sample_requests():
    return [
        request(ip="2.2.2.2", date="04/Mar/2020:10:10:00 +0000", status="403", uri="/before", user_agent=""),
        request(ip="2.2.2.2", date="04/Mar/2020:10:25:00 +0000", status="403", uri="/during", user_agent="Mozilla/5.0"),
        request(ip="2.2.2.2", date="04/Mar/2020:10:26:00 +0000", status="200", uri="/ok", user_agent="Other/1.0"),
        request(ip="2.2.2.2", date="04/Mar/2020:10:45:00 +0000", status="404", uri="/after"),
        request(ip="9.9.9.9", date="04/Mar/2020:10:25:00 +0000", status="403", uri="/benign"),
    ]


@pytest.fixture
def proxy_issue():
    return NonRuleIssue(type="proxy", date="Wed Mar 04 10:00:00.000000 2020",
                        msg="(111)Connection refused: AH00957: HTTP: attempt to connect to 127.0.0.1:8080 failed")
