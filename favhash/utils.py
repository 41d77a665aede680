import base64
import mmh3

from favhash.errors import EmptyInputError


def to_int32(value):
    """
    將 unsigned 32-bit 值以二補數轉為 signed 32-bit（>= 2**31 變負數）。
    """
    value &= 0xFFFFFFFF
    if value >= 0x80000000:
        return value - 0x100000000
    return value


def fingerprint(data_bytes):
    """
    計算 favicon 指紋：
    1. 原始 bytes 做標準 base64（含 padding、不換行）
    2. 對 base64 文字的 ASCII bytes 做 MurmurHash3 x86_32，seed=0
    3. 以二補數轉為 signed 32-bit
    注意：hash 的對象是 base64 文字，不是原始 bytes！
    """
    if not data_bytes:
        raise EmptyInputError()
    b64 = base64.b64encode(bytes(data_bytes))
    digest = mmh3.hash(b64, seed=0, signed=False)
    return to_int32(digest)
