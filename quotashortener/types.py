from typing import Any
from collections.abc import Callable
from datetime import datetime


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type LambdaConfiguration = dict[str, Any]

# Source of the current (timezone-aware) time
type Clock = Callable[[], datetime]
