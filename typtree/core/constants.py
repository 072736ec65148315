class empty:
    def __bool__(self):
        return False


DEFAULT_ENCODING = "utf-8"
ENV_PREFIX = "TYPTREE_"
SEPARATOR = "_"
SERDE_FLAGS_ATTR = "__serde_flags__"
