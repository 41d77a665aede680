"""
config.py
定位器與 HTTP 的設定。所有清單都是不可變 tuple，依優先順序排列。
"""

import os
from dataclasses import dataclass
from pathlib import Path

# (selector, 要取的屬性)，順序即優先權
ICON_SELECTORS = (
    ('link[rel="shortcut icon"]', 'href'),
    ('link[rel="icon"]', 'href'),
    ('link[rel="apple-touch-icon"]', 'href'),
    ('link[rel="apple-touch-icon-precomposed"]', 'href'),
    ('link[rel="mask-icon"]', 'href'),
    ('link[rel="fluid-icon"]', 'href'),
    ('meta[property="og:image"]', 'content'),
)

COMMON_PATHS = (
    '/favicon.ico',
    '/favicon.png',
    '/favicon.svg',
    '/favicon.gif',
    '/apple-touch-icon.png',
    '/apple-touch-icon-precomposed.png',
    '/assets/favicon.ico',
    '/assets/favicon.png',
    '/assets/img/favicon.ico',
    '/assets/images/favicon.ico',
    '/static/favicon.ico',
    '/static/favicon.png',
    '/static/img/favicon.ico',
    '/static/images/favicon.ico',
    '/images/favicon.ico',
    '/images/favicon.png',
    '/img/favicon.ico',
    '/img/favicon.png',
    '/public/favicon.ico',
    '/public/favicon.png',
    '/resources/favicon.ico',
    '/resources/images/favicon.ico',
    '/wp-content/themes/favicon.ico',
    '/wp-content/uploads/favicon.ico',
    '/sites/default/files/favicon.ico',
    '/misc/favicon.ico',
    '/templates/favicon.ico',
    '/media/favicon.ico',
    '/skin/frontend/default/default/favicon.ico',
)

VALID_CONTENT_TYPES = (
    'image/x-icon',
    'image/vnd.microsoft.icon',
    'image/ico',
    'image/icon',
    'image/png',
    'image/gif',
    'image/svg+xml',
    'application/octet-stream',
)

# browserconfig.xml 中可能帶圖示的 tile 元素
BROWSERCONFIG_TILES = (
    'square70x70logo',
    'square150x150logo',
    'wide310x150logo',
    'square310x310logo',
    'tileimage',
)

DEFAULT_USER_AGENT = "Mozilla/5.0 (favhash FaviconLocator)"


@dataclass(frozen=True)
class LocatorConfig:
    icon_selectors: tuple = ICON_SELECTORS
    common_paths: tuple = COMMON_PATHS
    valid_content_types: tuple = VALID_CONTENT_TYPES
    # 開啟後在 HTML 與常見路徑之間多查 manifest / browserconfig
    extended_sources: bool = False


@dataclass(frozen=True)
class HttpConfig:
    timeout: float = 10
    verify: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True


def load_api_key(apikey_arg=None):
    """
    依序取得 Shodan API Key：
    1. 參數 --apikey
    2. 環境變數 SHODAN_API_KEY
    3. ~/.shodan/api_key（shodan CLI init 產生的檔案）
    都沒有則回傳 None
    """
    if apikey_arg:
        return apikey_arg.strip()
    env_key = os.environ.get("SHODAN_API_KEY", "").strip()
    if env_key:
        return env_key
    keyfile = Path.home() / ".shodan" / "api_key"
    if keyfile.exists():
        key = keyfile.read_text().strip()
        return key or None
    return None
