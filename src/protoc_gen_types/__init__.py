__author__ = """Pandelis Zembashis"""
__version__ = "0.1.0"

from protoc_gen_types.logger import get_logger  # noqa: E402

log = get_logger()
