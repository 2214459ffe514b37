__title__ = 'sprig'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

from .arguments import *
from .signatures import *
from .argv import *
from .events import *
from .commands import *
from .keys import *
from .prompts import *
from .process import Process
from .application import *
from .faults import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    "Process",
)

# Load the exposed API of the specs and the signature grammar
__all__ += arguments.__all__  # type: ignore[attr-defined]
__all__ += signatures.__all__  # type: ignore[attr-defined]
__all__ += argv.__all__  # type: ignore[attr-defined]
# Load the exposed API of the events and the commands
__all__ += events.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the prompts
__all__ += keys.__all__  # type: ignore[attr-defined]
__all__ += prompts.__all__  # type: ignore[attr-defined]
# Load the exposed API of the application and the faults
__all__ += application.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
