"""webhook 入口。"""

from aisho.ingress.controller import IngressController, IngressResponse
from aisho.ingress.signature import compute_signature, verify_signature

__all__ = ["IngressController", "IngressResponse", "compute_signature", "verify_signature"]
