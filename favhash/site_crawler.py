"""
site_crawler.py
定位器用到的外部能力：HTTP 抓取、HTML 解析、相對網址解析。
"""

import logging
import re
import warnings
from collections import namedtuple
from urllib.parse import urljoin, urlsplit

import requests
import urllib3
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from bs4.builder import ParserRejectedMarkup
from requests.structures import CaseInsensitiveDict

from favhash.config import HttpConfig
from favhash.errors import FetchError, ParseError, ResolutionError

logger = logging.getLogger(__name__)

FetchResult = namedtuple("FetchResult", ["status", "headers", "body"])

# 開頭帶協定，例如 https://、http://
SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def normalize_target(target):
    """
    補上協定（預設 https://），回傳可解析出 scheme 與 host 的絕對網址
    """
    target = target.strip()
    if not SCHEME_RE.match(target):
        target = "https://" + target.lstrip("/")
    parts = urlsplit(target)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"invalid target: {target!r}")
    return target


def is_success(status):
    return 200 <= status < 300


def make_fetcher(http_config=None, session=None):
    """
    建立 fetch(url) -> FetchResult 函式，共用同一個 requests.Session。
    任何傳輸錯誤一律轉成 FetchError。
    """
    http_config = http_config or HttpConfig()
    session = session or requests.Session()
    session.headers["User-Agent"] = http_config.user_agent
    if not http_config.verify:
        # 掃描用途，關閉憑證驗證警告
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def fetch(url):
        try:
            resp = session.get(
                url,
                timeout=http_config.timeout,
                verify=http_config.verify,
                allow_redirects=http_config.allow_redirects,
            )
        except requests.RequestException as e:
            raise FetchError(url, e) from e
        logger.debug("GET %s -> %s", url, resp.status_code)
        return FetchResult(resp.status_code, CaseInsensitiveDict(resp.headers), resp.content)

    return fetch


def fetch_page(fetch, url):
    """抓目標頁面，非 2xx 視為 FetchError"""
    result = fetch(url)
    if not is_success(result.status):
        raise FetchError(url, f"HTTP {result.status}")
    return result


def parse_html(body):
    """
    解析 HTML，解析器無法處理時丟 ParseError。
    bytes 直接交給 BeautifulSoup，由它依 BOM / <meta charset> 判斷編碼
    """
    try:
        return BeautifulSoup(body, "html.parser")
    except ParserRejectedMarkup as e:
        raise ParseError(f"unable to parse HTML: {e}") from e


def select_first_attr(doc, selector, attr):
    """
    依文件順序取第一個符合 selector 的元素的屬性值；
    沒有元素或元素沒有該屬性時回傳 None
    """
    element = doc.select_one(selector)
    if element is None:
        return None
    value = element.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_url(base, ref):
    """
    以 base 解析 ref，結果必須是有 scheme 與 host 的絕對網址，否則丟 ResolutionError
    """
    try:
        resolved = urljoin(base, ref)
        parts = urlsplit(resolved)
        hostname = parts.hostname
    except ValueError as e:
        raise ResolutionError(base, ref) from e
    if parts.scheme not in ("http", "https") or not hostname:
        raise ResolutionError(base, ref)
    return resolved


def parse_browserconfig(body):
    """以 html.parser 解析 browserconfig.xml（標籤名會轉小寫）"""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        return parse_html(body)
