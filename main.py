#!/usr/bin/env python3
import argparse
import logging
import sys

from favhash import (
    config,
    console,
    favicon_handler,
    log_manager,
    shodan_client,
    site_crawler,
    utils,
)
from favhash.errors import FavhashError


def print_banner():
    console.result(r"""
  ___          _  _         _
 | __|_ ___ __| || |__ _ __| |_
 | _/ _` \ V /| __ / _` (_-< ' \
 |_|\__,_|\_/ |_||_\__,_/__/_||_|
======== favicon MMH3 hash → Shodan ========➤
""")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="favhash", description="favhash: favicon MMH3 hash 與 Shodan 查詢")
    parser.add_argument('target', nargs='?', metavar='TARGET', help='分析網址（等同 -u）')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-u', metavar='URL', help='分析網址')
    group.add_argument('-f', metavar='ICON_FILE', help='使用本機 icon')
    group.add_argument('-hash', metavar='HASH', type=int, help='直接使用 hash 查詢')
    parser.add_argument('-k', '--apikey', metavar='API_KEY', help='Shodan API Key（未提供時讀 SHODAN_API_KEY 或 ~/.shodan/api_key）')
    parser.add_argument('--no-query', action='store_true', help='只計算 hash，不查 Shodan')
    parser.add_argument('-q', '--query', metavar='SHODAN_Q', help='額外 Shodan 查詢條件')
    parser.add_argument('--deep', action='store_true', help='額外檢查 manifest 與 browserconfig.xml')
    parser.add_argument('--timeout', type=float, default=10, help='HTTP 逾時秒數（預設 10）')
    parser.add_argument('--verify', action='store_true', help='驗證 TLS 憑證')
    parser.add_argument('--log', action='store_true', help='將結果寫入 logs/ 資料夾')
    parser.add_argument('-v', '--verbose', action='store_true', help='顯示除錯訊息')
    return parser.parse_args(argv)


def check_conflicts(args):
    """檢查輸入來源，回傳錯誤訊息；沒有問題回傳 None"""
    if args.target and (args.u or args.f or args.hash is not None):
        return "TARGET 與 -u、-f、-hash 只能擇一"
    if args.target:
        args.u = args.target
    if not (args.u or args.f or args.hash is not None):
        return "必須指定 TARGET、-u、-f 或 -hash"
    if args.hash is not None and args.no_query:
        return "-hash 必須搭配 Shodan 查詢，不能使用 --no-query"
    return None


def check_api_key(api_key):
    """顯示 API Key 資訊，回傳 api-info dict"""
    console.info("Checking Shodan API key status...")
    api_info = shodan_client.shodan_api_info(api_key)
    console.success("API Key Information:")
    console.result(f"    Plan: {api_info.get('plan')}")
    console.result(f"    Query Credits: {api_info.get('query_credits')}")
    console.result(f"    Scan Credits: {api_info.get('scan_credits')}")
    if shodan_client.is_limited_plan(api_info):
        console.warn("You are using a free/dev API key. Results might be limited.")
        console.warn("Consider upgrading to a paid plan for full access to Shodan search.")
    return api_info


def analyze_url(url, fetch, locator_config):
    """
    定位 favicon → 下載 → 計算 hash，回傳 (favicon_url, favicon_bytes, hashval)
    """
    locator = favicon_handler.FaviconLocator(fetch, locator_config)
    console.info(f"Target URL: {site_crawler.normalize_target(url)}")
    favicon_url = locator.locate(url)
    console.success(f"Found favicon at: {favicon_url}")
    favicon_bytes = favicon_handler.download_favicon(fetch, favicon_url)
    return favicon_url, favicon_bytes, utils.fingerprint(favicon_bytes)


def print_search_result(search_result, hashval, api_info):
    if search_result.total == 0 and shodan_client.is_limited_plan(api_info):
        console.warn("No results found. This might be due to API key limitations.")
        console.warn(f"Try searching for this hash manually on Shodan: {shodan_client.build_query(hashval)}")
        return
    console.success(f"Found {search_result.total} matches")
    for match in search_result.matches:
        console.result("")
        for line in shodan_client.format_shodan_result_entry(match):
            console.result(f"    {line}")
        console.result("    ---")


def run(args):
    api_key = None
    api_info = None
    if not args.no_query:
        api_key = config.load_api_key(args.apikey)
        if not api_key:
            console.error("Shodan API key is required for searching. Use -k to provide it.")
            console.warn("Tip: use --no-query if you only want to calculate the hash.")
            return 1
        api_info = check_api_key(api_key)

    summary = {}
    favicon_bytes = None
    if args.u:
        fetch = site_crawler.make_fetcher(config.HttpConfig(timeout=args.timeout, verify=args.verify))
        locator_config = config.LocatorConfig(extended_sources=args.deep)
        favicon_url, favicon_bytes, hashval = analyze_url(args.u, fetch, locator_config)
        summary.update({"target": args.u, "favicon_url": favicon_url})
    elif args.f:
        favicon_bytes = favicon_handler.get_favicon_bytes_from_file(args.f)
        hashval = utils.fingerprint(favicon_bytes)
        summary["icon_file"] = args.f
    else:
        hashval = args.hash
    summary["hash"] = hashval
    console.success(f"Favicon MMH3 hash: {hashval}")

    log_dir = None
    if args.log:
        if args.u:
            log_dir = log_manager.prepare_log_dir(domain=log_manager.extract_domain(site_crawler.normalize_target(args.u)))
        else:
            log_dir = log_manager.prepare_log_dir(hashval=hashval)
        if favicon_bytes:
            log_manager.write_favicon_file(log_dir, favicon_bytes)
        log_manager.write_hash_log(log_dir, hashval)

    if not args.no_query:
        console.info("Searching Shodan...")
        search_result = shodan_client.shodan_search(hashval, api_key, extra_query=args.query)
        summary["query"] = shodan_client.build_query(hashval, args.query)
        summary["shodan_result_count"] = search_result.total
        print_search_result(search_result, hashval, api_info)
        if log_dir:
            log_manager.write_shodan_result_log(log_dir, search_result.matches)

    if log_dir:
        log_manager.write_summary_log(log_dir, summary)
        console.info(f"查詢與記錄已寫入：{log_dir}")
    return 0


def main(argv=None):
    console.setup()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
    )
    print_banner()
    problem = check_conflicts(args)
    if problem:
        console.error(problem)
        return 1
    try:
        return run(args)
    except FileNotFoundError as e:
        console.error(f"檔案不存在: {e}")
    except FavhashError as e:
        console.error(f"Error: {e}")
    except ValueError as e:
        console.error(f"Error: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
