"""
Port-mapping parsing.

Turns the `Ports` column printed by `docker ps`, for example
``0.0.0.0:8080->80/tcp, [::]:8080->80/tcp``, into the list of URLs that
are reachable from the local machine.
"""
from typing import Iterable, List

URL_TEMPLATE = 'http://localhost:{port}'


def extract_host_port(host_part: str) -> str:
    """Return the port after the last ':' of a host binding, or ''."""
    host_part = host_part.strip()
    if not host_part:
        return ''

    idx = host_part.rfind(':')
    if idx == -1 or idx == len(host_part) - 1:
        return ''
    return host_part[idx + 1:].strip()


def parse_ports(raw: str) -> List[str]:
    """Convert a raw port-mapping string into deduplicated local URLs.

    Clauses without a host binding (``80/tcp``) or without a usable port
    are skipped; this never raises on malformed input.
    """
    raw = (raw or '').strip()
    if not raw:
        return []

    urls = []
    seen = set()
    for segment in raw.split(','):
        segment = segment.strip()
        if '->' not in segment:
            continue

        host_part, _, _ = segment.partition('->')
        port = extract_host_port(host_part)
        if not port:
            continue

        url = URL_TEMPLATE.format(port=port)
        if url in seen:
            continue
        seen.add(url)
        urls.append(url)

    return urls


def append_unique(existing: List[str], values: Iterable[str]) -> List[str]:
    """Append values not already present, keeping first-seen order."""
    result = list(existing)
    seen = set(result)
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result
