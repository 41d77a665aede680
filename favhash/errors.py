"""
errors.py
favhash 的例外類別。定位器只對外拋出 NotFoundError，其餘候選錯誤皆在內部吸收。
"""


class FavhashError(Exception):
    """所有 favhash 錯誤的基底類別"""


class FetchError(FavhashError):
    def __init__(self, url, reason):
        self.url = url
        self.reason = reason
        super().__init__(f"failed to fetch {url}: {reason}")


class ParseError(FavhashError):
    pass


class ResolutionError(FavhashError):
    def __init__(self, base, ref):
        self.base = base
        self.ref = ref
        super().__init__(f"cannot resolve {ref!r} against {base!r}")


class NotFoundError(FavhashError):
    def __init__(self, target, page_error=None):
        self.target = target
        # step 1 失敗的原因（若有），方便呼叫端顯示
        self.page_error = page_error
        msg = f"no favicon found for {target}"
        if page_error is not None:
            msg += f" (page: {page_error})"
        super().__init__(msg)


class EmptyInputError(FavhashError):
    def __init__(self):
        super().__init__("cannot fingerprint empty favicon data")


class ShodanAPIError(FavhashError):
    def __init__(self, message, status=None):
        self.status = status
        super().__init__(message)
