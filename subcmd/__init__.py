__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'subcmd'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
__version__ = "0.1.0"

from .kinds import *
from .coercion import *
from .parameters import *
from .context import *
from .flags import *
from .parse import *
from .checker import *
from .dispatch import *
from .faults import *
from .usage import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the kinds
__all__ += kinds.__all__  # type: ignore[attr-defined]
# Load the exposed API of the coercion helpers
__all__ += coercion.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parameter model
__all__ += parameters.__all__  # type: ignore[attr-defined]
# Load the exposed API of the context
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the flag set
__all__ += flags.__all__  # type: ignore[attr-defined]
# Load the exposed API of the binder
__all__ += parse.__all__  # type: ignore[attr-defined]
# Load the exposed API of the checker
__all__ += checker.__all__  # type: ignore[attr-defined]
# Load the exposed API of the dispatcher
__all__ += dispatch.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the usage text
__all__ += usage.__all__  # type: ignore[attr-defined]
