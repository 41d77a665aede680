"""
shodan_client.py
使用 Shodan HTTP API 以 favicon hash 搜尋主機。
"""

import logging
from collections import namedtuple

import requests

from favhash.errors import ShodanAPIError

logger = logging.getLogger(__name__)

API_BASE = "https://api.shodan.io"
LIMITED_PLANS = ("dev", "free", "oss")

SearchResult = namedtuple("SearchResult", ["total", "matches"])


def build_query(favhash, extra_query=None):
    query = f"http.favicon.hash:{favhash}"
    if extra_query:
        query += f" {extra_query}"
    return query


def _api_get(path, params, timeout):
    url = API_BASE + path
    try:
        r = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as e:
        raise ShodanAPIError(f"Shodan request failed: {e}") from e
    if r.status_code in (401, 403):
        raise ShodanAPIError("invalid API key", status=r.status_code)
    if r.status_code != 200:
        message = f"Shodan API returned status code {r.status_code}"
        try:
            detail = r.json().get("error")
        except ValueError:
            detail = None
        if detail:
            message += f": {detail}"
        raise ShodanAPIError(message, status=r.status_code)
    try:
        data = r.json()
    except ValueError as e:
        raise ShodanAPIError(f"undecodable Shodan response: {e}") from e
    if not isinstance(data, dict):
        raise ShodanAPIError(f"unexpected Shodan response: {data!r}")
    return data


def shodan_api_info(api_key, timeout=10):
    """
    取得 API Key 資訊（plan、query_credits、scan_credits）
    """
    return _api_get("/api-info", {"key": api_key}, timeout)


def is_limited_plan(api_info):
    return (api_info or {}).get("plan") in LIMITED_PLANS


def shodan_search(favhash, api_key, extra_query=None, timeout=60):
    """
    以 http.favicon.hash 搜尋，回傳 SearchResult(total, matches)
    """
    query = build_query(favhash, extra_query)
    logger.info("Shodan search: %s", query)
    data = _api_get("/shodan/host/search", {"key": api_key, "query": query}, timeout)
    matches = data.get("matches") or []
    return SearchResult(data.get("total", len(matches)), matches)


def format_shodan_result_entry(item):
    ip = item.get('ip_str', item.get('ip', 'N/A')) or 'N/A'
    port = item.get('port', 'N/A') or 'N/A'
    location = item.get('location', {}) or {}
    city = location.get('city') or 'N/A'
    country = location.get('country_name') or 'N/A'
    lines = [f"IP: {ip}", f"Port: {port}"]
    if item.get('hostnames'):
        lines.append(f"Hostnames: {', '.join(item['hostnames'])}")
    if item.get('domains'):
        lines.append(f"Domains: {', '.join(item['domains'])}")
    lines.append(f"Location: {city}, {country}")
    return lines
