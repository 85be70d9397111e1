__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'sprout'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .arguments import *
from .commands import *
from .context import *
from .discovery import *
from .extensions import *
from .faults import *
from .help import *
from .loader import *
from .parser import *
from .plugins import *
from .printer import *
from .registry import *
from .router import *
from .runtime import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the declarations
__all__ += arguments.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += extensions.__all__  # type: ignore[attr-defined]
__all__ += plugins.__all__  # type: ignore[attr-defined]
# Load the exposed API of the engine
__all__ += parser.__all__  # type: ignore[attr-defined]
__all__ += router.__all__  # type: ignore[attr-defined]
__all__ += loader.__all__  # type: ignore[attr-defined]
__all__ += registry.__all__  # type: ignore[attr-defined]
__all__ += discovery.__all__  # type: ignore[attr-defined]
# Load the exposed API of the runtime
__all__ += context.__all__  # type: ignore[attr-defined]
__all__ += help.__all__  # type: ignore[attr-defined]
__all__ += printer.__all__  # type: ignore[attr-defined]
__all__ += runtime.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
