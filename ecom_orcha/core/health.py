"""
Liveness probes against the running gateway.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests


logger = logging.getLogger('ecom_orchestrator.health')


@dataclass
class Probe:
    """An HTTP endpoint checked by the health command."""
    title: str
    path: str


@dataclass
class ProbeResult:
    """Outcome of one probe."""
    probe: Probe
    url: str
    ok: bool
    body: str = ""
    error: Optional[str] = None


DEFAULT_PROBES = [
    Probe(title="Gateway health", path="/health"),
    Probe(title="Backend health (via gateway)", path="/api/health"),
]


class HealthChecker:
    """
    Runs each probe independently; a failing probe never stops the next one.
    """
    def __init__(self, gateway_url: str, timeout: float = 5.0, session: requests.Session = None,
                 probes: List[Probe] = None):
        self.gateway_url = gateway_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.probes = probes if probes is not None else list(DEFAULT_PROBES)

    def check(self, probe: Probe) -> ProbeResult:
        url = f"{self.gateway_url}/{probe.path.lstrip('/')}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return ProbeResult(probe=probe, url=url, ok=True, body=response.text)
        except requests.exceptions.ConnectionError:
            error = f"Cannot connect to {url}"
        except requests.exceptions.Timeout:
            error = f"Request to {url} timed out"
        except requests.exceptions.RequestException as e:
            error = f"Request to {url} failed: {str(e)}"

        logger.debug(error)
        return ProbeResult(probe=probe, url=url, ok=False, error=error)

    def check_all(self) -> List[ProbeResult]:
        return [self.check(probe) for probe in self.probes]
