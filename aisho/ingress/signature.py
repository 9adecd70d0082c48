"""LINE webhook 签名校验。"""

import base64
import hashlib
import hmac


def compute_signature(body: bytes, secret: str) -> str:
    """计算请求体的 base64 编码 HMAC-SHA256。"""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """以常量时间比较 x-line-signature 与期望值。"""
    if not signature or not secret:
        return False
    return hmac.compare_digest(compute_signature(body, secret), signature)
