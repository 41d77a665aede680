"""
console.py
終端機彩色輸出：[*] 資訊、[+] 成功、[!] 警告、[-] 錯誤。
"""

from colorama import Fore, Style, just_fix_windows_console


def setup():
    just_fix_windows_console()


def _out(color, text):
    print(f"{color}{text}{Style.RESET_ALL}")


def info(text):
    _out(Fore.CYAN, f"[*] {text}")


def success(text):
    _out(Fore.GREEN, f"[+] {text}")


def warn(text):
    _out(Fore.YELLOW, f"[!] {text}")


def error(text):
    _out(Fore.RED, f"[-] {text}")


def result(text):
    _out(Fore.MAGENTA, text)
