# flake8: noqa
from .api import *
from .checks import *
from .core.context import Culture, DeserializationContext
from .core.errors import *
from .core.strings import canonical, matches


__version__ = "0.4.0"
