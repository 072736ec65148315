__title__ = "typtree"
__package__ = "typtree"
__description__ = "Typtree: Typed objects from document trees."
__url__ = "https://github.com/seandstewart/typtree"
__version__ = "0.4.0"
__author__ = "Sean Stewart"
__author_email__ = "sean_stewart@me.com"
__license__ = "MIT"
__copyright__ = "Copyright 2019 Sean Stewart"


__all__ = (
    "__title__",
    "__package__",
    "__description__",
    "__url__",
    "__version__",
    "__author__",
    "__author_email__",
    "__license__",
    "__copyright__",
)
