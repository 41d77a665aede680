import os
import json
import datetime

import tldextract

# 只用套件內建的 public suffix 快照，不連網更新
_extract = tldextract.TLDExtract(suffix_list_urls=())


def extract_domain(url):
    """
    取得網址的註冊網域（example.co.uk），無法判斷時退回 hostname，供 log 分類
    """
    ext = _extract(url)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return ext.domain or "unknown"


def prepare_log_dir(domain=None, hashval=None, timestamp=None, base_dir=None):
    """
    建立日誌資料夾，結構如 logs/domain/YYYYmmdd_HHMMSS/
    或 logs/hashval/YYYYmmdd_HHMMSS/
    """
    base_dir = base_dir or os.path.join(os.getcwd(), "logs")
    if not timestamp:
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    if domain:
        log_dir = os.path.join(base_dir, domain, timestamp)
    elif hashval is not None:
        log_dir = os.path.join(base_dir, str(hashval), timestamp)
    else:
        log_dir = os.path.join(base_dir, "unknown", timestamp)
    os.makedirs(log_dir, exist_ok=True)
    return log_dir


def write_favicon_file(log_dir, favicon_bytes):
    """
    將下載到的 favicon 原始 bytes 寫入 favicon.ico，方便之後比對。
    """
    path = os.path.join(log_dir, "favicon.ico")
    with open(path, "wb") as f:
        f.write(favicon_bytes)


def write_hash_log(log_dir, hashval):
    """
    將 favicon hash 寫入 hash.log，方便快速檢視。
    """
    path = os.path.join(log_dir, "hash.log")
    with open(path, "w", encoding="utf-8") as f:
        f.write(str(hashval) + "\n")


def write_shodan_result_log(log_dir, result_list):
    """
    將 Shodan 查詢結果寫入 shodan_result.log，一行一筆 JSON。
    """
    path = os.path.join(log_dir, "shodan_result.log")
    with open(path, "w", encoding="utf-8") as f:
        for entry in result_list:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")


def write_summary_log(log_dir, summary_obj):
    """
    將總結資訊寫入 summary.json，包含目標、favicon 網址、hash、查詢與結果數。
    """
    path = os.path.join(log_dir, "summary.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(summary_obj, f, ensure_ascii=False, indent=2)
