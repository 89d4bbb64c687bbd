"""music-bridge: YouTube Music catalog integration behind a common provider contract"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("music-bridge")
except PackageNotFoundError:
    __version__ = "dev"
