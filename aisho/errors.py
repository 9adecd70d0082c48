"""
aisho 的异常类型。

入口层错误（MethodNotAllowed、Unauthorized、MalformedPayload）携带 HTTP 状态码，
在 IngressController 处终止请求；其余错误在事件管道内部按阶段处理。
"""


class AishoError(Exception):
    """所有 aisho 异常的基类。"""


class IngressError(AishoError):
    """导致整个 webhook 请求失败的错误。"""

    status: int = 400

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class MethodNotAllowed(IngressError):
    """非 POST 请求。"""

    status = 405


class Unauthorized(IngressError):
    """签名缺失或校验失败。"""

    status = 401


class MalformedPayload(IngressError):
    """请求体不是合法的 webhook JSON。"""

    status = 400


class FetchError(AishoError):
    """附件内容获取失败。"""


class FetchTimeout(FetchError):
    """附件内容获取超时。"""


class ParseError(AishoError):
    """聊天记录无法解析。"""


class AnalyticsError(AishoError):
    """任一分析协作者失败（不区分具体是哪一个）。"""


class DeliveryError(AishoError):
    """最终结果推送失败（已发送一次兜底道歉）。"""


class FallbackDeliveryError(DeliveryError):
    """兜底道歉消息本身也推送失败。只记录日志，不再重试。"""
