"""Import utilities used for input/output and operator-facing messages."""

from .logging import console as console
from .logging import log_error as log_error
from .logging import log_info as log_info
from .logging import log_warning as log_warning
