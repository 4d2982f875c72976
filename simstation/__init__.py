"""SimStation — orchestration of iOS simulators through ``xcrun simctl``."""

from simstation.__version__ import __version__

__all__ = ['__version__']
