# app/models/enums.py

from enum import Enum

class FailureKind(str, Enum):
    provider = "provider"      # the API answered with an error status
    transport = "transport"    # the request never got a usable answer
    empty = "empty"            # the model answered without any text
    unknown = "unknown"
