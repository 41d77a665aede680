"""
favicon_handler.py
Favicon 定位器：依優先順序嘗試各種策略，第一個通過驗證的網址即為結果。
預設策略:
1. 解析首頁 HTML 宣告的圖示（<link rel=...> / og:image）
2. 探測常見 favicon 路徑
開啟 extended_sources 時，於 1 與 2 之間加入 manifest 與 browserconfig.xml。
"""

import json
import logging
import os
from urllib.parse import urlsplit

from requests.structures import CaseInsensitiveDict

from favhash import site_crawler
from favhash.config import BROWSERCONFIG_TILES, LocatorConfig
from favhash.errors import FetchError, NotFoundError, ParseError, ResolutionError

logger = logging.getLogger(__name__)


def is_valid_favicon(fetch, url, valid_content_types):
    """
    驗證 url 是否為可用的 favicon:
    (a) 2xx 狀態碼
    (b) Content-Type 開頭屬於允許清單
    (c) 有回報長度時必須 > 0（長度未知則不因此判失敗）
    任何 FetchError 視為驗證失敗，不往外丟。
    """
    try:
        result = fetch(url)
    except FetchError as e:
        logger.debug("validation fetch failed for %s: %s", url, e)
        return False
    if not site_crawler.is_success(result.status):
        return False

    headers = CaseInsensitiveDict(result.headers or {})
    content_type = headers.get("Content-Type", "").strip().lower()
    if not content_type.startswith(tuple(valid_content_types)):
        logger.debug("rejecting %s: content-type %r", url, content_type)
        return False

    length = _reported_length(headers, result.body)
    if length is not None and length <= 0:
        logger.debug("rejecting %s: empty body", url)
        return False
    return True


def _reported_length(headers, body):
    raw = headers.get("Content-Length")
    if raw is not None:
        try:
            return int(raw)
        except ValueError:
            pass
    if body is not None:
        return len(body)
    return None


class FaviconLocator:
    """
    locate(target) -> 已驗證的 favicon 絕對網址，找不到丟 NotFoundError。
    fetch 為 fetch(url) -> FetchResult 的函式，失敗時丟 FetchError。
    """

    def __init__(self, fetch, config=None):
        self.fetch = fetch
        self.config = config or LocatorConfig()

    def strategies(self):
        """依優先順序回傳 (名稱, 策略) 清單；每個策略回傳網址或 None"""
        steps = [("html", self.find_favicon_in_html)]
        if self.config.extended_sources:
            steps.append(("manifest", self.find_favicon_in_manifest))
            steps.append(("browserconfig", self.find_favicon_in_browserconfig))
        steps.append(("common-paths", self.check_common_paths))
        return steps

    def locate(self, target):
        target = site_crawler.normalize_target(target)
        page = _PageState(target)
        for name, strategy in self.strategies():
            logger.info("trying %s strategy for %s", name, target)
            found = strategy(page)
            if found:
                logger.info("favicon found via %s: %s", name, found)
                return found
        raise NotFoundError(target, page.error) from page.error

    def validate(self, url):
        return is_valid_favicon(self.fetch, url, self.config.valid_content_types)

    def _first_valid(self, base, refs):
        """依序解析並驗證候選網址，回傳第一個通過的"""
        for ref in refs:
            try:
                url = site_crawler.resolve_url(base, ref)
            except ResolutionError as e:
                logger.debug("skipping candidate: %s", e)
                continue
            if self.validate(url):
                return url
        return None

    def find_favicon_in_html(self, page):
        doc = page.document(self.fetch)
        if doc is None:
            return None
        for selector, attr in self.config.icon_selectors:
            ref = site_crawler.select_first_attr(doc, selector, attr)
            if ref is None:
                continue
            logger.debug("found %s: %s", selector, ref)
            found = self._first_valid(page.url, [ref])
            if found:
                return found
        return None

    def find_favicon_in_manifest(self, page):
        doc = page.document(self.fetch)
        if doc is None:
            return None
        href = site_crawler.select_first_attr(doc, 'link[rel="manifest"]', "href")
        if href is None:
            return None
        try:
            manifest_url = site_crawler.resolve_url(page.url, href)
            resp = site_crawler.fetch_page(self.fetch, manifest_url)
            manifest = json.loads(resp.body)
        except (ResolutionError, FetchError, ValueError) as e:
            logger.debug("manifest unavailable: %s", e)
            return None
        icons = manifest.get("icons") if isinstance(manifest, dict) else None
        if not isinstance(icons, list):
            return None
        refs = [icon["src"] for icon in icons if isinstance(icon, dict) and isinstance(icon.get("src"), str)]
        return self._first_valid(manifest_url, refs)

    def find_favicon_in_browserconfig(self, page):
        doc = page.document(self.fetch)
        ref = None
        if doc is not None:
            ref = site_crawler.select_first_attr(doc, 'meta[name="msapplication-config"]', "content")
        if ref is None or ref.lower() == "none":
            ref = "/browserconfig.xml"
        try:
            config_url = site_crawler.resolve_url(page.url, ref)
            resp = site_crawler.fetch_page(self.fetch, config_url)
            tiles = site_crawler.parse_browserconfig(resp.body)
        except (ResolutionError, FetchError, ParseError) as e:
            logger.debug("browserconfig unavailable: %s", e)
            return None
        refs = []
        for tag in BROWSERCONFIG_TILES:
            element = tiles.find(tag)
            if element is not None and element.get("src"):
                refs.append(element["src"].strip())
        return self._first_valid(config_url, refs)

    def check_common_paths(self, page):
        parts = urlsplit(page.url)
        for path in self.config.common_paths:
            favicon_url = f"{parts.scheme}://{parts.netloc}{path}"
            logger.debug("trying: %s", favicon_url)
            if self.validate(favicon_url):
                return favicon_url
        return None


class _PageState:
    """單次 locate 的目標頁面；只抓一次並快取解析結果或錯誤"""

    def __init__(self, url):
        self.url = url
        self.error = None
        self._doc = None
        self._loaded = False

    def document(self, fetch):
        if not self._loaded:
            self._loaded = True
            try:
                resp = site_crawler.fetch_page(fetch, self.url)
                self._doc = site_crawler.parse_html(resp.body)
            except (FetchError, ParseError) as e:
                logger.warning("HTML detection failed for %s: %s", self.url, e)
                self.error = e
        return self._doc


def download_favicon(fetch, url):
    """下載 favicon 內容，非 2xx 或傳輸錯誤丟 FetchError"""
    result = site_crawler.fetch_page(fetch, url)
    return result.body


def get_favicon_bytes_from_file(path):
    """
    讀取本地 icon 檔案並回傳 bytes，檔案不存在丟 FileNotFoundError
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    with open(path, "rb") as f:
        return f.read()
