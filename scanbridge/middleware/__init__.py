from scanbridge.middleware.function_gate import FunctionGateMiddleware
from scanbridge.middleware.logging import LoggingMiddleware

__all__ = ["FunctionGateMiddleware", "LoggingMiddleware"]
