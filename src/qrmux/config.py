"""Default protocol values."""

PROTOCOL_VERSION = 1  # "v" field of every frame
DEFAULT_CHUNK_SIZE = 800  # characters of text per frame
DEFAULT_ENCODING = "utf-8"
DEFAULT_CHECKSUM = "rolling"  # see integrity.CHECKSUM_ALGORITHMS
MAX_TOTAL_FRAMES = 65535  # largest "t" a frame may declare
