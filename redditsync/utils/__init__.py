from .circuit_breaker import Admission, CircuitBreaker, CircuitState

__all__ = [
    'Admission',
    'CircuitBreaker',
    'CircuitState',
]
