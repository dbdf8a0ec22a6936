from .filesystem import FilesystemPort
from .hasher import HasherPort
from .transport import ChannelPort

__all__ = ["FilesystemPort", "HasherPort", "ChannelPort"]
